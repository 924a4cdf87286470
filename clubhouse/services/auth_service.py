"""Registration, login and token lifecycle services."""

from __future__ import annotations

import logging

from sqlmodel import Session

from clubhouse.core.constants import AdminRole, MemberStatus, Permission, UserRole, utcnow
from clubhouse.core.errors import (
    EMAIL_CONFLICT,
    INVALID_EMAIL,
    MISSING_FIELDS,
    ServiceError,
    bad_request,
    conflict,
    forbidden,
    unauthorized,
)
from clubhouse.core.security import hash_password, password_policy_errors, verify_password
from clubhouse.models.admin_user import AdminUser
from clubhouse.models.auth_session import AuthSession
from clubhouse.models.credential import Credential
from clubhouse.models.member import Member
from clubhouse.models.waitlist_member import WaitlistMember
from clubhouse.repositories import admin_repo, credential_repo, member_repo, waitlist_repo
from clubhouse.schemas.auth import (
    AdminCreated,
    AdminRegistrationInput,
    AuthResponse,
    AuthUser,
    LoginInput,
    LogoutResult,
    RegistrationInput,
)
from clubhouse.services import session_service, waitlist_service
from clubhouse.services.authorization import has_permission, parse_admin_role, resolve_permissions
from clubhouse.services.capacity import has_member_capacity, has_waitlist_capacity, membership_lock
from clubhouse.services.member_service import email_in_use, is_valid_email, new_member

logger = logging.getLogger("clubhouse.auth")

INVALID_CREDENTIALS = unauthorized("invalid_credentials", "Invalid email or password")
REGISTRATION_CLOSED = conflict(
    "registration_closed",
    "Registration is currently closed. Both member list and waitlist are at capacity",
)


def validate_new_account(*, email: str, password: str, confirm_password: str) -> ServiceError | None:
    """Check email shape, password confirmation and password policy, in that order."""

    if not is_valid_email(email):
        return INVALID_EMAIL
    if password != confirm_password:
        return bad_request("password_mismatch", "Passwords do not match")
    policy_errors = password_policy_errors(password)
    if policy_errors:
        return bad_request(
            "invalid_password",
            "Password does not meet requirements",
            {"errors": policy_errors},
        )
    return None


def register(
    session: Session,
    input_data: RegistrationInput,
) -> tuple[AuthResponse | None, ServiceError | None]:
    """Register as an active member, or join the waitlist once members are full."""

    if (
        input_data.email is None
        or input_data.password is None
        or input_data.confirm_password is None
        or input_data.first_name is None
        or input_data.last_name is None
    ):
        return None, MISSING_FIELDS

    error = validate_new_account(
        email=input_data.email,
        password=input_data.password,
        confirm_password=input_data.confirm_password,
    )
    if error is not None:
        return None, error
    password_hash = hash_password(input_data.password)

    with membership_lock:
        if email_in_use(session, input_data.email):
            return None, EMAIL_CONFLICT

        if has_member_capacity(session):
            role = UserRole.MEMBER
            member = new_member(
                session,
                email=input_data.email,
                first_name=input_data.first_name,
                last_name=input_data.last_name,
                phone=input_data.phone,
            )
            account_id = member_repo.create_member(session, member, commit=False).id
        elif has_waitlist_capacity(session):
            role = UserRole.WAITLIST
            entry = waitlist_service.enqueue(
                session,
                email=input_data.email,
                first_name=input_data.first_name,
                last_name=input_data.last_name,
                phone=input_data.phone,
                reason_for_joining=input_data.reason_for_joining,
                referred_by=input_data.referred_by,
            )
            account_id = entry.id
        else:
            logger.warning("Registration rejected for %s: registry and waitlist full", input_data.email)
            return None, REGISTRATION_CLOSED

        credential_repo.create_credential(
            session,
            Credential(
                account_id=account_id,
                email=input_data.email,
                password_hash=password_hash,
                role=role,
            ),
            commit=False,
        )
        auth_session = session_service.create_session(
            session,
            user_id=account_id,
            email=input_data.email,
            role=role,
            admin_role=None,
            permissions=resolve_permissions(role),
            commit=False,
        )
        session.commit()

    logger.info("Registered %s as %s", account_id, role)
    return _auth_response(auth_session, input_data.first_name, input_data.last_name), None


def login(
    session: Session,
    input_data: LoginInput,
) -> tuple[AuthResponse | None, ServiceError | None]:
    """Exchange email and password for a fresh session."""

    if input_data.email is None or input_data.password is None:
        return None, bad_request("invalid_request", "Email and password required")

    credential = credential_repo.get_credential_by_email(session, input_data.email)
    if credential is None or not verify_password(input_data.password, credential.password_hash):
        logger.info("Failed login attempt")
        return None, INVALID_CREDENTIALS

    first_name, last_name = display_name(session, credential.role, credential.account_id)

    if credential.role == UserRole.MEMBER:
        member = member_repo.get_member_by_id(session, credential.account_id)
        if member is not None and member.status == MemberStatus.ACTIVE:
            member.last_login = utcnow()
            member_repo.update_member(session, member, commit=False)

    auth_session = session_service.create_session(
        session,
        user_id=credential.account_id,
        email=credential.email,
        role=credential.role,
        admin_role=credential.admin_role,
        permissions=_permission_snapshot(session, credential),
        commit=False,
    )
    session.commit()

    logger.info("User %s logged in", credential.account_id)
    return _auth_response(auth_session, first_name, last_name), None


def register_admin(
    session: Session,
    caller: AuthSession,
    input_data: AdminRegistrationInput,
) -> tuple[AdminCreated | None, ServiceError | None]:
    """Create an admin account; no session is issued for it."""

    if caller.role != UserRole.ADMIN or not has_permission(caller, Permission.ASSIGN_ADMIN):
        logger.warning("User %s tried to create an admin without permission", caller.user_id)
        return None, forbidden("Forbidden. Requires admin with permission to assign admin roles")

    if (
        input_data.email is None
        or input_data.password is None
        or input_data.confirm_password is None
        or input_data.first_name is None
        or input_data.last_name is None
        or input_data.admin_role is None
    ):
        return None, MISSING_FIELDS

    error = validate_new_account(
        email=input_data.email,
        password=input_data.password,
        confirm_password=input_data.confirm_password,
    )
    if error is not None:
        return None, error
    password_hash = hash_password(input_data.password)

    with membership_lock:
        if email_in_use(session, input_data.email):
            return None, EMAIL_CONFLICT

        admin_role = parse_admin_role(input_data.admin_role)
        if admin_role is None:
            return None, bad_request("invalid_role", "Invalid admin role")
        if admin_role == AdminRole.SUPER_ADMIN and caller.admin_role != AdminRole.SUPER_ADMIN:
            logger.warning("User %s tried to create a super admin", caller.user_id)
            return None, forbidden("Only super admins can create other super admins")

        admin_user = create_admin_account(
            session,
            email=input_data.email,
            password_hash=password_hash,
            first_name=input_data.first_name,
            last_name=input_data.last_name,
            admin_role=admin_role,
        )

    logger.info("Admin %s created %s admin %s", caller.user_id, admin_role, admin_user.id)
    return (
        AdminCreated(
            id=admin_user.id,
            email=admin_user.email,
            first_name=admin_user.first_name,
            last_name=admin_user.last_name,
            admin_role=admin_user.admin_role,
        ),
        None,
    )


def create_admin_account(
    session: Session,
    *,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    admin_role: AdminRole,
) -> AdminUser:
    """Persist an admin profile and its credential.

    Permissions are resolved from the sub-role table now and stored as-is.
    """

    admin_user = AdminUser(
        email=email,
        first_name=first_name,
        last_name=last_name,
        admin_role=admin_role,
        permissions=resolve_permissions(UserRole.ADMIN, admin_role),
    )
    admin_repo.create_admin(session, admin_user, commit=False)
    credential_repo.create_credential(
        session,
        Credential(
            account_id=admin_user.id,
            email=email,
            password_hash=password_hash,
            role=UserRole.ADMIN,
            admin_role=admin_role,
        ),
        commit=False,
    )
    session.commit()
    session.refresh(admin_user)
    return admin_user


def refresh(session: Session, token: str | None) -> tuple[AuthResponse | None, ServiceError | None]:
    """Swap a live token for a new one carrying the same identity and permissions."""

    if token is None:
        return None, unauthorized("invalid_token", "Invalid token")

    current = session_service.get_active_session(session, token)
    if current is None:
        return None, unauthorized("session_expired", "Session expired or invalid")

    user_id = current.user_id
    email = current.email
    role = current.role
    admin_role = current.admin_role
    permissions = list(current.permissions)

    session_service.revoke_session(session, token, commit=False)
    new_session = session_service.create_session(
        session,
        user_id=user_id,
        email=email,
        role=role,
        admin_role=admin_role,
        permissions=permissions,
        commit=False,
    )
    session.commit()

    first_name, last_name = display_name(session, role, user_id)
    return _auth_response(new_session, first_name, last_name), None


def logout(session: Session, token: str | None) -> tuple[LogoutResult | None, ServiceError | None]:
    """End the session for ``token``; repeating the call still succeeds."""

    if token is None:
        return None, unauthorized("invalid_token", "Invalid token")

    terminated = session_service.revoke_session(session, token)
    return LogoutResult(session_terminated=terminated), None


def display_name(session: Session, role: UserRole, account_id: str) -> tuple[str, str]:
    """Return first and last name from the registry matching ``role``."""

    record: AdminUser | Member | WaitlistMember | None = None
    if role == UserRole.ADMIN:
        record = admin_repo.get_admin_by_id(session, account_id)
    elif role == UserRole.MEMBER:
        record = member_repo.get_member_by_id(session, account_id)
    elif role == UserRole.WAITLIST:
        record = waitlist_repo.get_entry_by_id(session, account_id)

    if record is None:
        return "", ""
    return record.first_name, record.last_name


def _permission_snapshot(session: Session, credential: Credential) -> list[str]:
    if credential.role == UserRole.ADMIN:
        admin_user = admin_repo.get_admin_by_id(session, credential.account_id)
        if admin_user is not None:
            return list(admin_user.permissions)
    return resolve_permissions(credential.role, credential.admin_role)


def _auth_response(auth_session: AuthSession, first_name: str, last_name: str) -> AuthResponse:
    return AuthResponse(
        user=AuthUser(
            id=auth_session.user_id,
            email=auth_session.email,
            first_name=first_name,
            last_name=last_name,
            role=auth_session.role,
            admin_role=auth_session.admin_role,
        ),
        token=auth_session.token,
        expires_at=auth_session.expires_at,
    )
