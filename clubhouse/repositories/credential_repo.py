"""Database access helpers for credentials."""

from __future__ import annotations

from sqlmodel import Session, col, select

from clubhouse.models.credential import Credential


def get_credential_by_email(session: Session, email: str) -> Credential | None:
    """Return credential by login email."""

    return session.exec(select(Credential).where(col(Credential.email) == email)).first()


def get_credential_by_account_id(session: Session, account_id: str) -> Credential | None:
    """Return the credential linked to a member, waitlist entry or admin id."""

    return session.exec(select(Credential).where(col(Credential.account_id) == account_id)).first()


def create_credential(session: Session, credential: Credential, *, commit: bool = True) -> Credential:
    """Persist a new credential."""

    session.add(credential)
    if commit:
        session.commit()
        session.refresh(credential)
    return credential


def update_credential(session: Session, credential: Credential, *, commit: bool = True) -> Credential:
    """Persist an updated credential."""

    session.add(credential)
    if commit:
        session.commit()
        session.refresh(credential)
    return credential


def delete_credential(session: Session, credential: Credential, *, commit: bool = True) -> None:
    """Hard-delete a credential."""

    session.delete(credential)
    if commit:
        session.commit()
