"""Model exports used by metadata discovery."""

from clubhouse.models.admin_user import AdminUser
from clubhouse.models.auth_session import AuthSession
from clubhouse.models.credential import Credential
from clubhouse.models.member import Member
from clubhouse.models.waitlist_member import WaitlistMember

__all__ = ["AdminUser", "AuthSession", "Credential", "Member", "WaitlistMember"]
