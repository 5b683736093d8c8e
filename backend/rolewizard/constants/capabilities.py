"""Built-in capability catalog for the role & dashboard wizard.

Each entry: cap (unique key), area (grouping label), label, depends_on (keys
that must also be granted). Dependencies must stay acyclic. Deployments can
replace the whole list via CAPABILITY_CATALOG_PATH (JSON list of the same shape).
"""
from __future__ import annotations
from typing import Any, Dict, List

CAPABILITIES: List[Dict[str, Any]] = [
    # ONBOARDING
    {'cap': 'onboarding.view', 'area': 'Onboarding', 'label': 'View Onboarding', 'depends_on': []},
    {'cap': 'onboarding.complete', 'area': 'Onboarding', 'label': 'Complete Onboarding', 'depends_on': ['onboarding.view']},
    {'cap': 'onboarding.review', 'area': 'Onboarding', 'label': 'Review Partner Onboarding', 'depends_on': ['onboarding.view']},
    {'cap': 'onboarding.approve', 'area': 'Onboarding', 'label': 'Approve Partner Onboarding', 'depends_on': ['onboarding.review']},

    # ORGANIZATIONS
    {'cap': 'organizations.view', 'area': 'Organizations', 'label': 'View Organizations', 'depends_on': []},
    {'cap': 'organizations.create', 'area': 'Organizations', 'label': 'Create Organizations', 'depends_on': ['organizations.view']},
    {'cap': 'organizations.update', 'area': 'Organizations', 'label': 'Update Organizations', 'depends_on': ['organizations.view']},
    {'cap': 'organizations.delete', 'area': 'Organizations', 'label': 'Delete Organizations', 'depends_on': ['organizations.view']},
    {'cap': 'organizations.manage_status', 'area': 'Organizations', 'label': 'Manage Organization Status', 'depends_on': ['organizations.update']},

    # PROJECTS
    {'cap': 'projects.view', 'area': 'Projects', 'label': 'View Projects', 'depends_on': []},
    {'cap': 'projects.create', 'area': 'Projects', 'label': 'Create Projects', 'depends_on': ['projects.view']},
    {'cap': 'projects.update', 'area': 'Projects', 'label': 'Update Projects', 'depends_on': ['projects.view']},
    {'cap': 'projects.delete', 'area': 'Projects', 'label': 'Delete Projects', 'depends_on': ['projects.view']},
    {'cap': 'projects.close', 'area': 'Projects', 'label': 'Close Projects', 'depends_on': ['projects.update']},

    # BUDGETS
    {'cap': 'budgets.view', 'area': 'Budgets', 'label': 'View Budgets', 'depends_on': []},
    {'cap': 'budgets.create', 'area': 'Budgets', 'label': 'Create Budgets', 'depends_on': ['budgets.view']},
    {'cap': 'budgets.update', 'area': 'Budgets', 'label': 'Update Budgets', 'depends_on': ['budgets.view']},
    {'cap': 'budgets.delete', 'area': 'Budgets', 'label': 'Delete Budgets', 'depends_on': ['budgets.view']},
    {'cap': 'budgets.submit', 'area': 'Budgets', 'label': 'Submit Budgets for Approval', 'depends_on': ['budgets.update']},
    {'cap': 'budgets.approve_level1', 'area': 'Budgets', 'label': 'Approve Budgets (Level 1)', 'depends_on': ['budgets.view']},
    {'cap': 'budgets.approve_level2', 'area': 'Budgets', 'label': 'Approve Budgets (Level 2)', 'depends_on': ['budgets.approve_level1']},
    {'cap': 'budgets.approve_final', 'area': 'Budgets', 'label': 'Final Budget Approval', 'depends_on': ['budgets.approve_level2']},

    # FUND REQUESTS
    {'cap': 'fund_requests.view', 'area': 'Fund Requests', 'label': 'View Fund Requests', 'depends_on': []},
    {'cap': 'fund_requests.create', 'area': 'Fund Requests', 'label': 'Create Fund Requests', 'depends_on': ['fund_requests.view', 'budgets.view']},
    {'cap': 'fund_requests.update', 'area': 'Fund Requests', 'label': 'Update Fund Requests', 'depends_on': ['fund_requests.view']},
    {'cap': 'fund_requests.submit', 'area': 'Fund Requests', 'label': 'Submit Fund Requests', 'depends_on': ['fund_requests.update']},
    {'cap': 'fund_requests.approve', 'area': 'Fund Requests', 'label': 'Approve Fund Requests', 'depends_on': ['fund_requests.view']},
    {'cap': 'fund_requests.reject', 'area': 'Fund Requests', 'label': 'Reject Fund Requests', 'depends_on': ['fund_requests.view']},

    # CONTRACTS
    {'cap': 'contracts.view', 'area': 'Contracts', 'label': 'View Contracts', 'depends_on': []},
    {'cap': 'contracts.create', 'area': 'Contracts', 'label': 'Create Contracts', 'depends_on': ['contracts.view', 'projects.view']},
    {'cap': 'contracts.update', 'area': 'Contracts', 'label': 'Update Contracts', 'depends_on': ['contracts.view']},
    {'cap': 'contracts.sign', 'area': 'Contracts', 'label': 'Sign Contracts', 'depends_on': ['contracts.view']},
    {'cap': 'contracts.approve', 'area': 'Contracts', 'label': 'Approve Contracts', 'depends_on': ['contracts.view']},
    {'cap': 'contracts.docusign', 'area': 'Contracts', 'label': 'Manage DocuSign Integration', 'depends_on': ['contracts.update']},

    # DISBURSEMENTS
    {'cap': 'disbursements.view', 'area': 'Disbursements', 'label': 'View Disbursements', 'depends_on': []},
    {'cap': 'disbursements.create', 'area': 'Disbursements', 'label': 'Create Disbursements', 'depends_on': ['disbursements.view', 'contracts.view']},
    {'cap': 'disbursements.approve', 'area': 'Disbursements', 'label': 'Approve Disbursements', 'depends_on': ['disbursements.view']},
    {'cap': 'disbursements.process', 'area': 'Disbursements', 'label': 'Process Disbursements', 'depends_on': ['disbursements.approve']},
    {'cap': 'disbursements.xero', 'area': 'Disbursements', 'label': 'Manage Xero Integration', 'depends_on': ['disbursements.process']},

    # DOCUMENTS
    {'cap': 'documents.view', 'area': 'Documents', 'label': 'View Documents', 'depends_on': []},
    {'cap': 'documents.upload', 'area': 'Documents', 'label': 'Upload Documents', 'depends_on': ['documents.view']},
    {'cap': 'documents.download', 'area': 'Documents', 'label': 'Download Documents', 'depends_on': ['documents.view']},
    {'cap': 'documents.delete', 'area': 'Documents', 'label': 'Delete Documents', 'depends_on': ['documents.view']},
    {'cap': 'documents.approve', 'area': 'Documents', 'label': 'Approve Documents', 'depends_on': ['documents.view']},

    # COMPLIANCE
    {'cap': 'compliance.view', 'area': 'Compliance', 'label': 'View Compliance', 'depends_on': []},
    {'cap': 'compliance.submit', 'area': 'Compliance', 'label': 'Submit Compliance Documents', 'depends_on': ['compliance.view', 'documents.upload']},
    {'cap': 'compliance.review', 'area': 'Compliance', 'label': 'Review Compliance', 'depends_on': ['compliance.view']},
    {'cap': 'compliance.approve', 'area': 'Compliance', 'label': 'Approve Compliance', 'depends_on': ['compliance.review']},
    {'cap': 'compliance.manage_templates', 'area': 'Compliance', 'label': 'Manage Compliance Templates', 'depends_on': ['compliance.view']},

    # REPORTS
    {'cap': 'reports.view', 'area': 'Reports', 'label': 'View Reports', 'depends_on': []},
    {'cap': 'reports.create', 'area': 'Reports', 'label': 'Create Reports', 'depends_on': ['reports.view']},
    {'cap': 'reports.submit', 'area': 'Reports', 'label': 'Submit Reports', 'depends_on': ['reports.create']},
    {'cap': 'reports.review', 'area': 'Reports', 'label': 'Review Reports', 'depends_on': ['reports.view']},
    {'cap': 'reports.approve', 'area': 'Reports', 'label': 'Approve Reports', 'depends_on': ['reports.review']},
    {'cap': 'reports.export', 'area': 'Reports', 'label': 'Export Reports', 'depends_on': ['reports.view']},

    # RECONCILIATION
    {'cap': 'reconciliation.view', 'area': 'Reconciliation', 'label': 'View Reconciliation', 'depends_on': []},
    {'cap': 'reconciliation.create', 'area': 'Reconciliation', 'label': 'Create Reconciliation', 'depends_on': ['reconciliation.view', 'receipts.view']},
    {'cap': 'reconciliation.submit', 'area': 'Reconciliation', 'label': 'Submit Reconciliation', 'depends_on': ['reconciliation.create']},
    {'cap': 'reconciliation.review', 'area': 'Reconciliation', 'label': 'Review Reconciliation', 'depends_on': ['reconciliation.view']},
    {'cap': 'reconciliation.approve', 'area': 'Reconciliation', 'label': 'Approve Reconciliation', 'depends_on': ['reconciliation.review']},

    # RECEIPTS
    {'cap': 'receipts.view', 'area': 'Receipts', 'label': 'View Receipts', 'depends_on': []},
    {'cap': 'receipts.upload', 'area': 'Receipts', 'label': 'Upload Receipts', 'depends_on': ['receipts.view']},
    {'cap': 'receipts.verify', 'area': 'Receipts', 'label': 'Verify Receipts', 'depends_on': ['receipts.view']},

    # USERS
    {'cap': 'users.view', 'area': 'Users', 'label': 'View Users', 'depends_on': []},
    {'cap': 'users.create', 'area': 'Users', 'label': 'Create Users', 'depends_on': ['users.view']},
    {'cap': 'users.update', 'area': 'Users', 'label': 'Update Users', 'depends_on': ['users.view']},
    {'cap': 'users.delete', 'area': 'Users', 'label': 'Delete Users', 'depends_on': ['users.view']},
    {'cap': 'users.manage_roles', 'area': 'Users', 'label': 'Manage User Roles', 'depends_on': ['users.update']},
    {'cap': 'users.reset_password', 'area': 'Users', 'label': 'Reset User Passwords', 'depends_on': ['users.view']},

    # APPROVALS
    {'cap': 'approvals.view', 'area': 'Approvals', 'label': 'View Approvals', 'depends_on': []},
    {'cap': 'approvals.coo_review', 'area': 'Approvals', 'label': 'COO Review & Approval', 'depends_on': ['approvals.view']},
    {'cap': 'approvals.gm_review', 'area': 'Approvals', 'label': 'GM Review & Approval', 'depends_on': ['approvals.view']},
    {'cap': 'approvals.manage_workflow', 'area': 'Approvals', 'label': 'Manage Approval Workflows', 'depends_on': ['approvals.view']},

    # ANALYTICS
    {'cap': 'analytics.view', 'area': 'Analytics', 'label': 'View Analytics', 'depends_on': []},
    {'cap': 'analytics.grants', 'area': 'Analytics', 'label': 'View Grants Analytics', 'depends_on': ['analytics.view']},
    {'cap': 'analytics.kpi', 'area': 'Analytics', 'label': 'View KPI Dashboard', 'depends_on': ['analytics.view']},
    {'cap': 'analytics.executive', 'area': 'Analytics', 'label': 'View Executive Dashboard', 'depends_on': ['analytics.view']},
    {'cap': 'analytics.export', 'area': 'Analytics', 'label': 'Export Analytics Data', 'depends_on': ['analytics.view']},

    # AUDIT & SECURITY
    {'cap': 'audit.view', 'area': 'Audit & Security', 'label': 'View Audit Logs', 'depends_on': []},
    {'cap': 'audit.export', 'area': 'Audit & Security', 'label': 'Export Audit Logs', 'depends_on': ['audit.view']},
    {'cap': 'security.view', 'area': 'Audit & Security', 'label': 'View Security Settings', 'depends_on': []},
    {'cap': 'security.manage', 'area': 'Audit & Security', 'label': 'Manage Security Settings', 'depends_on': ['security.view']},

    # SYSTEM ADMIN
    {'cap': 'system.view', 'area': 'System Admin', 'label': 'View System Settings', 'depends_on': []},
    {'cap': 'system.configure', 'area': 'System Admin', 'label': 'Configure System', 'depends_on': ['system.view']},
    {'cap': 'system.integrations', 'area': 'System Admin', 'label': 'Manage Integrations', 'depends_on': ['system.configure']},
    {'cap': 'system.backup', 'area': 'System Admin', 'label': 'Manage Backups', 'depends_on': ['system.view']},
    {'cap': 'system.maintenance', 'area': 'System Admin', 'label': 'System Maintenance', 'depends_on': ['system.configure']},

    # KNOWLEDGE BASE
    {'cap': 'knowledge.view', 'area': 'Knowledge Base', 'label': 'View Knowledge Base', 'depends_on': []},
    {'cap': 'knowledge.create', 'area': 'Knowledge Base', 'label': 'Create Knowledge Articles', 'depends_on': ['knowledge.view']},
    {'cap': 'knowledge.update', 'area': 'Knowledge Base', 'label': 'Update Knowledge Articles', 'depends_on': ['knowledge.view']},
    {'cap': 'knowledge.delete', 'area': 'Knowledge Base', 'label': 'Delete Knowledge Articles', 'depends_on': ['knowledge.view']},
    {'cap': 'knowledge.manage_training', 'area': 'Knowledge Base', 'label': 'Manage Training Modules', 'depends_on': ['knowledge.view']},

    # FORUM
    {'cap': 'forum.view', 'area': 'Forum', 'label': 'View Forum', 'depends_on': []},
    {'cap': 'forum.post', 'area': 'Forum', 'label': 'Create Forum Posts', 'depends_on': ['forum.view']},
    {'cap': 'forum.moderate', 'area': 'Forum', 'label': 'Moderate Forum', 'depends_on': ['forum.view']},
    {'cap': 'forum.admin', 'area': 'Forum', 'label': 'Forum Administration', 'depends_on': ['forum.moderate']},

    # NOTIFICATIONS
    {'cap': 'notifications.view', 'area': 'Notifications', 'label': 'View Notifications', 'depends_on': []},
    {'cap': 'notifications.send', 'area': 'Notifications', 'label': 'Send Notifications', 'depends_on': []},
    {'cap': 'notifications.manage', 'area': 'Notifications', 'label': 'Manage Notification Settings', 'depends_on': ['notifications.view']},

    # REPORTED ISSUES
    {'cap': 'issues.view', 'area': 'Reported Issues', 'label': 'View Reported Issues', 'depends_on': []},
    {'cap': 'issues.create', 'area': 'Reported Issues', 'label': 'Report Issues', 'depends_on': []},
    {'cap': 'issues.update', 'area': 'Reported Issues', 'label': 'Update Issue Status', 'depends_on': ['issues.view']},
    {'cap': 'issues.assign', 'area': 'Reported Issues', 'label': 'Assign Issues', 'depends_on': ['issues.view']},
    {'cap': 'issues.resolve', 'area': 'Reported Issues', 'label': 'Resolve Issues', 'depends_on': ['issues.update']},
    {'cap': 'issues.delete', 'area': 'Reported Issues', 'label': 'Delete Issues', 'depends_on': ['issues.view']},

    # MESSAGES
    {'cap': 'messages.view', 'area': 'Messages', 'label': 'View Messages', 'depends_on': []},
    {'cap': 'messages.send', 'area': 'Messages', 'label': 'Send Messages', 'depends_on': ['messages.view']},
    {'cap': 'messages.broadcast', 'area': 'Messages', 'label': 'Broadcast Messages', 'depends_on': ['messages.send']},
]
