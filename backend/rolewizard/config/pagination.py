DEFAULT_LIMIT = 50
MAX_LIMIT = 200

# role version history is short; return all of it unless asked otherwise
VERSIONS_DEFAULT_LIMIT = 100

def normalize_pagination(limit_raw, offset_raw, default_limit: int = DEFAULT_LIMIT):
    try:
        limit = int(limit_raw) if limit_raw is not None else default_limit
        offset = int(offset_raw) if offset_raw is not None else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(0, offset)
    return limit, offset
