"""User roles and permission tags for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    CRM user roles, ordered by seniority.

    Role Hierarchy (highest to lowest):
    1. SUPER_ADMIN - Platform operator, sees every cliente
    2. ADMIN - Manages members and settings of a cliente
    3. MANAGER - Runs the sales team, assigns and transfers leads
    4. SALESPERSON - Works the leads assigned to them
    5. MEMBER - Views assigned leads
    6. VIEWER - No lead permissions

    Permission sets are declared per role in neocrm.core.permissions and
    do not follow the hierarchy (MANAGER cannot delete leads).
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MANAGER = "manager"
    SALESPERSON = "salesperson"
    MEMBER = "member"
    VIEWER = "viewer"


class Permission(str, PyEnum):
    """Fine-grained capability tags, written as '<resource>:<action>'."""

    LEADS_VIEW_ALL = "leads:view_all"
    LEADS_VIEW_ASSIGNED = "leads:view_assigned"
    LEADS_CREATE = "leads:create"
    LEADS_EDIT = "leads:edit"
    LEADS_DELETE = "leads:delete"
    LEADS_ASSIGN = "leads:assign"
    LEADS_TRANSFER = "leads:transfer"
    REPORTS_VIEW = "reports:view"
    REPORTS_EXPORT = "reports:export"
    SETTINGS_VIEW = "settings:view"
    SETTINGS_MANAGE = "settings:manage"
    USERS_VIEW = "users:view"
    USERS_MANAGE = "users:manage"
