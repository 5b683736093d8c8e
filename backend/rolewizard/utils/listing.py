from __future__ import annotations
"""List endpoint helpers: limit/offset pagination, ETag + Last-Modified, conditional GET."""
from typing import Callable, Iterable, Optional, Tuple
from flask import request, make_response
from sqlalchemy import select, func
from rolewizard import get_db
from rolewizard.config.pagination import normalize_pagination, DEFAULT_LIMIT
from rolewizard.errors import ValidationError
import hashlib
from datetime import datetime, timezone, timedelta
from email.utils import parsedate_to_datetime, format_datetime

TIMESTAMP_TOLERANCE = timedelta(seconds=1)

def canonicalize_timestamp(dt: datetime) -> datetime:
    """Return UTC tz-aware timestamp truncated to whole seconds (microseconds removed)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.replace(microsecond=0)

def _iso(dt: Optional[datetime]) -> str:
    return canonicalize_timestamp(dt).isoformat().replace('+00:00', 'Z') if dt else ''

def apply_pagination(stmt, default_limit: int = DEFAULT_LIMIT, scalars: bool = True):
    """Return (paged rows, total, limit, offset) for a select() statement.

    With ``scalars=False`` the rows are full result tuples, for statements
    selecting several entities or extra columns.
    """
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'), default_limit)
    except ValueError as e:
        raise ValidationError(str(e))
    session = get_db()
    total = session.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    result = session.execute(stmt.offset(offset).limit(limit))
    rows = list(result.scalars() if scalars else result.all())
    return rows, total, limit, offset

def compute_etag(ids: Iterable, total: int, limit: int, offset: int, latest_ts: Optional[str] = '') -> str:
    seed = f"{list(ids)}|{total}|{limit}|{offset}|{latest_ts or ''}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]

def build_list_payload(rows: list, total: int, limit: int, offset: int):
    return {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }

def _http_date(dt: datetime) -> str:
    return format_datetime(dt, usegmt=True)

def _stamp(resp, etag: str, latest_ts: Optional[datetime]):
    resp.headers['ETag'] = etag
    if latest_ts:
        latest_c = canonicalize_timestamp(latest_ts)
        resp.headers['Last-Modified'] = _http_date(latest_c)
        resp.headers['X-Last-Modified-ISO'] = _iso(latest_c)
    return resp

def make_cached_list_response(rows: list, total: int, limit: int, offset: int, latest_ts: Optional[datetime] = None,
                              fingerprint: Optional[Callable[[dict], object]] = None) -> Tuple[object, str]:
    """``fingerprint`` maps a row to what seeds the ETag (default: its id)."""
    ids = [fingerprint(r) if fingerprint else r.get('id') for r in rows]
    etag = compute_etag(ids, total, limit, offset, _iso(latest_ts))
    resp = make_response(build_list_payload(rows, total, limit, offset))
    return _stamp(resp, etag, latest_ts), etag

def make_cached_response(body: dict, fingerprint, latest_ts: Optional[datetime] = None):
    """Single-resource variant: ETag seeded like a one-row list; 304 when the client copy is current."""
    etag = compute_etag([fingerprint], 1, 1, 0, _iso(latest_ts))
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return _stamp(make_response(body), etag, latest_ts)

def _parse_if_modified_since(header_val: str) -> Optional[datetime]:
    if not header_val:
        return None
    try:
        dt = datetime.fromisoformat(header_val.replace('Z', '+00:00'))
    except ValueError:
        try:
            dt = parsedate_to_datetime(header_val)
        except (TypeError, ValueError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def handle_conditional(etag_value: str, latest_ts: Optional[datetime]):
    """Evaluate conditional request headers.

    Precedence: If-None-Match over If-Modified-Since (per RFC 9110 semantics).
    Returns a 304 response object if conditions satisfied, else None.
    """
    inm = request.headers.get('If-None-Match')
    if inm and inm.strip('"') == etag_value:
        return _stamp(make_response('', 304), etag_value, latest_ts)
    if inm:
        return None
    ims_raw = request.headers.get('If-Modified-Since')
    if ims_raw and latest_ts:
        ims_dt = _parse_if_modified_since(ims_raw)
        if ims_dt and canonicalize_timestamp(latest_ts) <= canonicalize_timestamp(ims_dt) + TIMESTAMP_TOLERANCE:
            return _stamp(make_response('', 304), etag_value, latest_ts)
    return None
