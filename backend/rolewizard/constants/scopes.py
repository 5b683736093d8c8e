"""Built-in scope catalog: category -> label, description and the enumerated options.

A role stores at most one value per category. Override with SCOPE_CATALOG_PATH
(JSON object of the same shape).
"""
from __future__ import annotations
from typing import Any, Dict


def _opt(value: str, label: str, description: str) -> Dict[str, str]:
    return {'value': value, 'label': label, 'description': description}


SCOPES: Dict[str, Dict[str, Any]] = {
    'project': {
        'label': 'Project Access',
        'description': 'Define which projects this role can access',
        'options': [
            _opt('all', 'All Projects', 'Access to all projects in the system (Admin level)'),
            _opt('organization', 'Organization Projects', "Access to all projects within user's organization"),
            _opt('assigned', 'Assigned Projects Only', 'Access only to specifically assigned projects'),
            _opt('self', 'Own Projects', 'Access only to projects user created or owns'),
            _opt('none', 'No Project Access', 'No access to any projects'),
        ],
    },
    'organization': {
        'label': 'Organization Access',
        'description': 'Define which organizations this role can access',
        'options': [
            _opt('all', 'All Organizations', 'Access to all organizations in the system (Admin level)'),
            _opt('current', 'Current Organization Only', "Access only to user's own organization"),
            _opt('assigned', 'Assigned Organizations', 'Access to specifically assigned organizations'),
            _opt('partners', 'Partner Organizations', 'Access to partner organizations only'),
            _opt('none', 'No Organization Access', 'No access to organization data'),
        ],
    },
    'data': {
        'label': 'Data Access Level',
        'description': 'Define the level of data access permissions',
        'options': [
            _opt('full', 'Full Access', 'Complete read, write, update, and delete access'),
            _opt('write', 'Read & Write', 'Can view and modify data, but not delete'),
            _opt('read', 'Read Only', 'Can view data but cannot make any changes'),
            _opt('restricted', 'Restricted Access', 'Limited access to specific data fields only'),
            _opt('none', 'No Data Access', 'No access to data'),
        ],
    },
    'users': {
        'label': 'User Access',
        'description': 'Define which users this role can manage or view',
        'options': [
            _opt('all', 'All Users', 'Access to all users in the system (Admin level)'),
            _opt('organization', 'Organization Users', 'Access to users within same organization'),
            _opt('team', 'Team Members', 'Access to direct team members only'),
            _opt('subordinates', 'Subordinates Only', 'Access to users reporting to this role'),
            _opt('self', 'Self Only', 'Access only to own user profile'),
            _opt('none', 'No User Access', 'No access to user management'),
        ],
    },
    'financial': {
        'label': 'Financial Data Access',
        'description': 'Define access to financial information',
        'options': [
            _opt('all', 'All Financial Data', 'Access to all financial information (Finance Admin)'),
            _opt('organization', 'Organization Finances', "Access to own organization's financial data"),
            _opt('project', 'Project Finances', 'Access to assigned project budgets and finances'),
            _opt('summary', 'Summary Only', 'Access to financial summaries, not detailed transactions'),
            _opt('none', 'No Financial Access', 'No access to financial data'),
        ],
    },
    'approval': {
        'label': 'Approval Authority',
        'description': 'Define approval authority and limits',
        'options': [
            _opt('unlimited', 'Unlimited Approval', 'Can approve any amount or request (Executive level)'),
            _opt('high', 'High Value Approval', 'Can approve requests up to high value threshold'),
            _opt('medium', 'Medium Value Approval', 'Can approve requests up to medium value threshold'),
            _opt('low', 'Low Value Approval', 'Can approve requests up to low value threshold'),
            _opt('recommend', 'Recommend Only', 'Can recommend but not approve'),
            _opt('none', 'No Approval Authority', 'Cannot approve any requests'),
        ],
    },
    'reporting': {
        'label': 'Reporting Access',
        'description': 'Define access to reports and analytics',
        'options': [
            _opt('all', 'All Reports', 'Access to all system reports and analytics'),
            _opt('executive', 'Executive Reports', 'Access to executive dashboards and KPIs'),
            _opt('organization', 'Organization Reports', "Access to own organization's reports"),
            _opt('project', 'Project Reports', 'Access to assigned project reports only'),
            _opt('basic', 'Basic Reports', 'Access to basic operational reports'),
            _opt('none', 'No Reporting Access', 'No access to reports'),
        ],
    },
    'document': {
        'label': 'Document Access',
        'description': 'Define access to documents and files',
        'options': [
            _opt('all', 'All Documents', 'Access to all documents in the system'),
            _opt('organization', 'Organization Documents', "Access to organization's documents"),
            _opt('project', 'Project Documents', 'Access to assigned project documents'),
            _opt('public', 'Public Documents', 'Access to public/shared documents only'),
            _opt('own', 'Own Documents', 'Access only to documents user uploaded'),
            _opt('none', 'No Document Access', 'No access to documents'),
        ],
    },
}
