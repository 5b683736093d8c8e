"""Seed definitions for preset roles & dashboard templates.
Used by scripts/seed_roles.py; capability lists are dependency-closed at seed time.
"""

# Role id -> definition (first version) + initial dashboard
ROLE_PRESETS = {
    'system_administrator': {
        'label': 'System Administrator',
        'description': 'Full system access, user and configuration management',
        'capabilities': [
            'users.view', 'users.create', 'users.update', 'users.delete', 'users.manage_roles', 'users.reset_password',
            'organizations.view', 'organizations.create', 'organizations.update', 'organizations.manage_status',
            'projects.view', 'audit.view', 'audit.export', 'security.view', 'security.manage',
            'system.view', 'system.configure', 'system.integrations', 'system.backup', 'system.maintenance',
            'notifications.view', 'notifications.send', 'notifications.manage',
        ],
        'scopes': {
            'project': 'all', 'organization': 'all', 'data': 'full', 'users': 'all',
            'financial': 'all', 'approval': 'unlimited', 'reporting': 'all', 'document': 'all',
        },
        'dashboard': {
            'menus': [
                {'key': 'admin', 'label': 'Administration', 'icon': 'settings', 'items': [
                    {'key': 'users', 'label': 'Users', 'route': '/admin/users'},
                    {'key': 'roles', 'label': 'Roles', 'route': '/admin/roles'},
                    {'key': 'audit', 'label': 'Audit Log', 'route': '/admin/audit'},
                ]},
                {'key': 'system', 'label': 'System', 'icon': 'server', 'route': '/admin/system'},
            ],
            'pages': ['dashboard', 'users', 'roles', 'audit', 'system'],
            'widgets': ['system-health', 'recent-audit', 'active-users'],
        },
    },
    'program_manager': {
        'label': 'Program Manager',
        'description': 'Manages projects, budgets and partner reporting',
        'capabilities': [
            'projects.view', 'projects.create', 'projects.update', 'projects.close',
            'budgets.view', 'budgets.create', 'budgets.update', 'budgets.submit',
            'reports.view', 'reports.review', 'compliance.view', 'compliance.review',
            'documents.view', 'documents.upload', 'documents.download',
            'issues.view', 'issues.create', 'issues.assign', 'analytics.view',
        ],
        'scopes': {
            'project': 'assigned', 'organization': 'assigned', 'data': 'write', 'users': 'team',
            'financial': 'project', 'approval': 'recommend', 'reporting': 'project', 'document': 'project',
        },
        'dashboard': {
            'menus': [
                {'key': 'projects', 'label': 'Projects', 'icon': 'folder', 'route': '/app/projects'},
                {'key': 'budgets', 'label': 'Budgets', 'icon': 'dollar', 'route': '/app/budgets'},
                {'key': 'reports', 'label': 'Reports', 'icon': 'chart', 'route': '/app/reports'},
            ],
            'pages': ['dashboard', 'projects', 'budgets', 'reports'],
            'widgets': ['project-timeline', 'compliance-status', 'upcoming-reports', 'recent-issues'],
        },
    },
    'finance_officer': {
        'label': 'Finance Officer',
        'description': 'Budgets, disbursements and reconciliation',
        'capabilities': [
            'budgets.view', 'budgets.approve_level1', 'fund_requests.view', 'fund_requests.approve',
            'disbursements.view', 'disbursements.create', 'disbursements.process',
            'reconciliation.view', 'reconciliation.review', 'receipts.view', 'receipts.verify',
            'reports.view', 'reports.export', 'analytics.view',
        ],
        'scopes': {
            'project': 'organization', 'organization': 'current', 'data': 'write', 'users': 'none',
            'financial': 'all', 'approval': 'medium', 'reporting': 'organization', 'document': 'organization',
        },
        'dashboard': {
            'menus': [
                {'key': 'finance', 'label': 'Finance', 'icon': 'finance', 'items': [
                    {'key': 'fund-requests', 'label': 'Fund Requests', 'route': '/app/fund-requests'},
                    {'key': 'disbursements', 'label': 'Disbursements', 'route': '/app/disbursements'},
                    {'key': 'reconciliation', 'label': 'Reconciliation', 'route': '/app/reconciliation'},
                ]},
            ],
            'pages': ['dashboard', 'fund-requests', 'disbursements', 'reconciliation'],
            'widgets': ['budget-summary', 'pending-disbursements', 'monthly-spending'],
        },
    },
    'partner_user': {
        'label': 'Partner User',
        'description': 'External partner submitting requests, reports and documents',
        'capabilities': [
            'onboarding.view', 'onboarding.complete', 'projects.view', 'budgets.view',
            'fund_requests.view', 'fund_requests.create', 'fund_requests.submit',
            'reports.view', 'reports.create', 'reports.submit',
            'documents.view', 'documents.upload', 'receipts.view', 'receipts.upload',
            'messages.view', 'messages.send',
        ],
        'scopes': {
            'project': 'assigned', 'organization': 'current', 'data': 'write', 'users': 'self',
            'financial': 'project', 'approval': 'none', 'reporting': 'project', 'document': 'own',
        },
        'dashboard': {
            'menus': [
                {'key': 'my-projects', 'label': 'My Projects', 'icon': 'folder', 'route': '/partner/projects'},
                {'key': 'requests', 'label': 'Fund Requests', 'icon': 'dollar', 'route': '/partner/fund-requests'},
                {'key': 'documents', 'label': 'Documents', 'icon': 'file', 'route': '/partner/documents'},
            ],
            'pages': ['dashboard', 'projects', 'fund-requests', 'documents'],
            'widgets': ['my-projects', 'pending-requests', 'upcoming-deadlines'],
        },
    },
}

# System dashboard templates (id derived from name)
DASHBOARD_TEMPLATES = [
    {
        'name': 'Executive Overview',
        'description': 'High-level KPIs and strategic metrics for leadership',
        'target_role': None,
        'widgets': ['total-budget', 'active-projects', 'pending-approvals', 'budget-utilization', 'project-status'],
        'layout_columns': 3,
    },
    {
        'name': 'Financial Overview',
        'description': 'Comprehensive financial tracking and budget management',
        'target_role': 'finance_officer',
        'widgets': ['budget-summary', 'pending-disbursements', 'monthly-spending'],
        'layout_columns': 3,
    },
    {
        'name': 'Operations Overview',
        'description': 'Day-to-day operational metrics and task management',
        'target_role': 'program_manager',
        'widgets': ['project-timeline', 'compliance-status', 'upcoming-reports', 'recent-issues'],
        'layout_columns': 3,
    },
    {
        'name': 'Partner Dashboard',
        'description': 'Essential tools and information for partners',
        'target_role': 'partner_user',
        'widgets': ['my-projects', 'pending-requests', 'upcoming-deadlines'],
        'layout_columns': 2,
    },
]
