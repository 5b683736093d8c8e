#!/usr/bin/env python
"""Idempotent seed script for preset roles, their dashboards & system dashboard templates.

Usage:
    python backend/scripts/seed_roles.py               # seed normally
    python backend/scripts/seed_roles.py --show-roles  # print role summary (after ensuring seed)
    python backend/scripts/seed_roles.py --dry-run     # validate presets, report what would be created (no DB changes)
    python backend/scripts/seed_roles.py --export-json roles.json
"""
from __future__ import annotations
import os, sys, argparse, textwrap, json, hashlib
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from rolewizard import create_app, get_db, get_catalogs  # type: ignore
from rolewizard.models.definitions import Base, RoleDefinition, DashboardTemplate
from rolewizard.services import definitions as store
from rolewizard.services.definitions import RoleDraft, DashboardDraft
from rolewizard.services.selection import close
from seeds.role_presets import ROLE_PRESETS, DASHBOARD_TEMPLATES


def preset_draft(role_id: str, preset: dict, capabilities) -> RoleDraft:
    return RoleDraft(
        role_id=role_id,
        label=preset['label'],
        description=preset.get('description', ''),
        capabilities=close(capabilities, preset['capabilities']),
        scopes=dict(preset['scopes']),
    )


def ensure_roles(dry_run: bool = False) -> int:
    capabilities, scopes = get_catalogs()
    created = 0
    for role_id, preset in ROLE_PRESETS.items():
        draft = preset_draft(role_id, preset, capabilities)
        if store.role_exists(role_id):
            continue
        created += 1
        if dry_run:
            store.validate_role_draft(draft, capabilities, scopes)
            continue
        row = store.save_role(draft, capabilities, scopes)
        dashboard = preset.get('dashboard')
        if dashboard:
            store.save_dashboard(role_id, DashboardDraft(
                menus=tuple(dashboard.get('menus', [])),
                pages=tuple(dashboard.get('pages', [])),
                widgets=tuple(dashboard.get('widgets', [])),
            ), activate=True)
        store.publish_role(role_id, row.version)
    return created


def ensure_templates(dry_run: bool = False) -> int:
    existing = set(get_db().execute(select(DashboardTemplate.id)).scalars())
    created = 0
    for tpl in DASHBOARD_TEMPLATES:
        if store.template_id_from_name(tpl['name']) in existing:
            continue
        created += 1
        if dry_run:
            continue
        store.save_template(
            tpl['name'],
            description=tpl.get('description', ''),
            target_role=tpl.get('target_role'),
            widgets=tpl.get('widgets', []),
            layout_columns=tpl.get('layout_columns', 3),
            is_system=True,
        )
    return created


def build_role_map():
    mapping = {}
    for role in get_db().execute(select(RoleDefinition).order_by(RoleDefinition.role_id)).scalars():
        latest = store.latest_role_version(role)
        mapping[role.role_id] = {
            'label': latest.label,
            'version': role.latest_version,
            'published_version': role.published_version,
            'active': role.active,
            'capabilities': sorted(latest.capabilities or []),
            'scopes': dict(sorted((latest.scopes or {}).items())),
        }
    return mapping


def print_role_summary(mapping):
    if not mapping:
        print("[INFO] No roles present.")
        return
    id_w = max(len(r) for r in mapping)
    print(f"{'Role'.ljust(id_w)} | Ver | Pub | Active | Caps | Sample (up to 6)")
    print('-' * (id_w + 60))
    for role_id, info in mapping.items():
        pub = str(info['published_version'] or '-')
        print(f"{role_id.ljust(id_w)} | {str(info['version']).rjust(3)} | {pub.rjust(3)} | "
              f"{str(info['active']).ljust(6)} | {str(len(info['capabilities'])).rjust(4)} | {', '.join(info['capabilities'][:6])}")


def parse_args():
    p = argparse.ArgumentParser(
        description="Seed preset roles & dashboard templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_roles.py\n  dry run: seed_roles.py --dry-run\n  show roles: seed_roles.py --show-roles\n""")
    )
    p.add_argument('--show-roles', action='store_true', help='Print role summary after seeding')
    p.add_argument('--dry-run', action='store_true', help='Validate presets and report counts without writing')
    p.add_argument('--export-json', nargs='?', const='-', metavar='FILE', help='Export role definitions JSON (to FILE or stdout if omitted)')
    return p.parse_args()


def main():
    args = parse_args()
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            session.execute(text('SELECT 1 FROM role_definitions LIMIT 1'))
        except OperationalError:
            # Auto-create schema for bootstrap; in real env prefer alembic upgrade
            session.rollback()
            import rolewizard.models.audit  # noqa: F401
            Base.metadata.create_all(session.get_bind())
        finally:
            session.commit()

    with app.app_context():
        session = get_db()
        try:
            created_r = ensure_roles(dry_run=args.dry_run)
            created_t = ensure_templates(dry_run=args.dry_run)
            if args.dry_run:
                print(f"[DRY-RUN] Roles would create: {created_r}, Templates would create: {created_t}")
            else:
                print(f"[DONE] Roles created: {created_r}, Templates created: {created_t}")
            role_map = build_role_map()
            if args.show_roles:
                print('\nRole Summary:')
                print_role_summary(role_map)
            if args.export_json is not None:
                # Deterministic checksum for change detection
                canonical = json.dumps(role_map, sort_keys=True, separators=(',', ':'))
                payload = {
                    'roles': role_map,
                    'meta': {
                        'roles_total': len(role_map),
                        'roles_checksum_sha256': hashlib.sha256(canonical.encode('utf-8')).hexdigest(),
                        'dry_run': args.dry_run,
                    }
                }
                if args.export_json == '-':
                    print(json.dumps(payload, indent=2, sort_keys=True))
                else:
                    with open(args.export_json, 'w', encoding='utf-8') as f:
                        json.dump(payload, f, indent=2, sort_keys=True)
                    print(f"[INFO] Exported JSON to {args.export_json}")
        finally:
            session.close()

if __name__ == '__main__':
    main()
