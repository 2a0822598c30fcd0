"""Tabular views of a user's history lists."""

import pandas as pd

from .user import UserData


def _frame(rows, columns, sort_by) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns).sort_values(sort_by).reset_index(drop=True)


def screen_name_frame(user: UserData) -> pd.DataFrame:
    return _frame(
        [
            {'changed_at': c.changed_at, 'changed_from': c.changed_from, 'changed_to': c.changed_to}
            for c in user.screen_name_history
        ],
        ['changed_at', 'changed_from', 'changed_to'],
        'changed_at',
    )


def email_history_frame(user: UserData) -> pd.DataFrame:
    return _frame(
        [
            {'changed_at': c.changed_at, 'changed_from': c.changed_from, 'changed_to': c.changed_to}
            for c in user.email_address_history
        ],
        ['changed_at', 'changed_from', 'changed_to'],
        'changed_at',
    )


def login_frame(user: UserData) -> pd.DataFrame:
    """Login IPs, oldest first."""
    return _frame(
        [{'created_at': ip.created_at, 'login_ip': ip.login_ip} for ip in user.last_logins],
        ['created_at', 'login_ip'],
        'created_at',
    )


def applications_frame(user: UserData) -> pd.DataFrame:
    return _frame(
        [
            {
                'approved_at': app.approved_at,
                'name': app.name,
                'organization': app.organization.get('name'),
                'permissions': ', '.join(app.permissions),
            }
            for app in user.authorized_applications
        ],
        ['approved_at', 'name', 'organization', 'permissions'],
        'approved_at',
    )
