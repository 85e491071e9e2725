"""
Document store abstraction for Firestore, SQLAlchemy and an in-memory test implementation.
"""

from __future__ import annotations

import copy
import time
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from google.cloud.firestore_v1 import (
    SERVER_TIMESTAMP,
    ArrayRemove,
    ArrayUnion,
    Query,
)
from sqlalchemy import JSON, Column, Float, String, create_engine, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from shared.constants import PROJECTS_COLLECTION, USERS_COLLECTION
from shared.document_convert import (
    joined_project_to_dict,
    profile_changes_to_dict,
    profile_from_dict,
    profile_to_dict,
    project_from_dict,
    project_to_dict,
)
from shared.types import JoinedProject, Project, UserProfile


class DbClient(Protocol):
    """Interface for document access."""

    def get_user(self, uid: str) -> Optional[UserProfile]:
        ...

    def create_user(self, profile: UserProfile) -> None:
        ...

    def update_user(self, uid: str, changes: dict) -> None:
        """Merges {UserProfile attribute: value} into the user document."""
        ...

    def list_users(self) -> list[UserProfile]:
        ...

    def add_saved_resource(self, uid: str, resource: str) -> None:
        ...

    def remove_saved_resource(self, uid: str, resource: str) -> None:
        ...

    def add_joined_project(self, uid: str, joined: JoinedProject) -> None:
        ...

    def add_project(self, project: Project) -> Project:
        ...

    def get_project(self, project_id: str) -> Optional[Project]:
        ...

    def list_projects(self, limit: int = 100) -> list[Project]:
        ...


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.users: Dict[str, UserProfile] = {}
        self.projects: Dict[str, Project] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.projects.clear()

    def get_user(self, uid: str) -> Optional[UserProfile]:
        profile = self.users.get(uid)
        return copy.deepcopy(profile) if profile else None

    def create_user(self, profile: UserProfile) -> None:
        self.users[profile.uid] = copy.deepcopy(profile)

    def update_user(self, uid: str, changes: dict) -> None:
        profile = self.users.get(uid) or UserProfile(uid=uid)
        self.users[uid] = replace(profile, **copy.deepcopy(changes))

    def list_users(self) -> list[UserProfile]:
        return [copy.deepcopy(p) for p in self.users.values()]

    def add_saved_resource(self, uid: str, resource: str) -> None:
        profile = self.users.setdefault(uid, UserProfile(uid=uid))
        if resource not in profile.saved_resources:
            profile.saved_resources.append(resource)

    def remove_saved_resource(self, uid: str, resource: str) -> None:
        profile = self.users.get(uid)
        if profile:
            profile.saved_resources = [
                r for r in profile.saved_resources if r != resource
            ]

    def add_joined_project(self, uid: str, joined: JoinedProject) -> None:
        profile = self.users.setdefault(uid, UserProfile(uid=uid))
        if joined not in profile.joined_projects:
            profile.joined_projects.append(copy.deepcopy(joined))

    def add_project(self, project: Project) -> Project:
        stored = replace(
            project,
            id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
        )
        self.projects[stored.id] = stored
        return copy.deepcopy(stored)

    def get_project(self, project_id: str) -> Optional[Project]:
        project = self.projects.get(project_id)
        return copy.deepcopy(project) if project else None

    def list_projects(self, limit: int = 100) -> list[Project]:
        # Newest insert first when timestamps tie.
        projects = sorted(
            reversed(list(self.projects.values())),
            key=lambda p: p.created_at,
            reverse=True,
        )
        return [copy.deepcopy(p) for p in projects[:limit]]


class FirestoreDbClient:
    """
    Cloud Firestore implementation. Documents keep the camelCase field names
    the web client reads.
    """

    def __init__(self, client):
        self.client = client

    def _user_ref(self, uid: str):
        return self.client.collection(USERS_COLLECTION).document(uid)

    def get_user(self, uid: str) -> Optional[UserProfile]:
        snapshot = self._user_ref(uid).get()
        if not snapshot.exists:
            return None
        return profile_from_dict(snapshot.to_dict(), uid=snapshot.id)

    def create_user(self, profile: UserProfile) -> None:
        self._user_ref(profile.uid).set(profile_to_dict(profile))

    def update_user(self, uid: str, changes: dict) -> None:
        # merge=True also covers profiles written before a field existed.
        self._user_ref(uid).set(profile_changes_to_dict(changes), merge=True)

    def list_users(self) -> list[UserProfile]:
        return [
            profile_from_dict(snapshot.to_dict(), uid=snapshot.id)
            for snapshot in self.client.collection(USERS_COLLECTION).stream()
        ]

    def add_saved_resource(self, uid: str, resource: str) -> None:
        self._user_ref(uid).set(
            {"savedResources": ArrayUnion([resource])}, merge=True
        )

    def remove_saved_resource(self, uid: str, resource: str) -> None:
        self._user_ref(uid).set(
            {"savedResources": ArrayRemove([resource])}, merge=True
        )

    def add_joined_project(self, uid: str, joined: JoinedProject) -> None:
        self._user_ref(uid).set(
            {"joinedProjects": ArrayUnion([joined_project_to_dict(joined)])},
            merge=True,
        )

    def add_project(self, project: Project) -> Project:
        data = project_to_dict(project)
        data["createdAt"] = SERVER_TIMESTAMP
        _, doc_ref = self.client.collection(PROJECTS_COLLECTION).add(data)
        return self.get_project(doc_ref.id) or replace(project, id=doc_ref.id)

    def get_project(self, project_id: str) -> Optional[Project]:
        snapshot = (
            self.client.collection(PROJECTS_COLLECTION).document(project_id).get()
        )
        if not snapshot.exists:
            return None
        return project_from_dict(snapshot.to_dict(), project_id=snapshot.id)

    def list_projects(self, limit: int = 100) -> list[Project]:
        query = (
            self.client.collection(PROJECTS_COLLECTION)
            .order_by("createdAt", direction=Query.DESCENDING)
            .limit(limit)
        )
        return [
            project_from_dict(snapshot.to_dict(), project_id=snapshot.id)
            for snapshot in query.stream()
        ]


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).

    Each document is stored as a JSON column in its Firestore shape.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _user_for_update(uid: str):
        return select(UserRow).where(UserRow.uid == uid).with_for_update()

    def _modify_user(self, uid: str, modify) -> None:
        # The row stays locked until commit so concurrent edits serialize.
        with self.Session() as session:
            row = session.execute(self._user_for_update(uid)).scalar_one_or_none()
            profile = profile_from_dict(row.data, uid=uid) if row else UserProfile(uid=uid)
            modify(profile)
            data = profile_to_dict(profile)
            if row:
                # Assign a new dict so the JSON column is flagged as changed.
                row.data = data
            else:
                session.add(UserRow(uid=uid, data=data))
            session.commit()

    def get_user(self, uid: str) -> Optional[UserProfile]:
        with self.Session() as session:
            row = session.get(UserRow, uid)
            return profile_from_dict(row.data, uid=row.uid) if row else None

    def create_user(self, profile: UserProfile) -> None:
        with self.Session() as session:
            row = session.get(UserRow, profile.uid)
            if row:
                row.data = profile_to_dict(profile)
            else:
                session.add(UserRow(uid=profile.uid, data=profile_to_dict(profile)))
            session.commit()

    def update_user(self, uid: str, changes: dict) -> None:
        def apply(profile: UserProfile) -> None:
            for key, value in changes.items():
                setattr(profile, key, value)

        self._modify_user(uid, apply)

    def list_users(self) -> list[UserProfile]:
        with self.Session() as session:
            rows = session.execute(select(UserRow)).scalars().all()
            return [profile_from_dict(row.data, uid=row.uid) for row in rows]

    def add_saved_resource(self, uid: str, resource: str) -> None:
        def apply(profile: UserProfile) -> None:
            if resource not in profile.saved_resources:
                profile.saved_resources.append(resource)

        self._modify_user(uid, apply)

    def remove_saved_resource(self, uid: str, resource: str) -> None:
        def apply(profile: UserProfile) -> None:
            profile.saved_resources = [
                r for r in profile.saved_resources if r != resource
            ]

        self._modify_user(uid, apply)

    def add_joined_project(self, uid: str, joined: JoinedProject) -> None:
        def apply(profile: UserProfile) -> None:
            if joined not in profile.joined_projects:
                profile.joined_projects.append(joined)

        self._modify_user(uid, apply)

    def add_project(self, project: Project) -> Project:
        stored = replace(project, id=uuid.uuid4().hex, created_at=None)
        now = time.time()
        data = project_to_dict(stored)
        data["createdAt"] = now
        with self.Session() as session:
            session.add(ProjectRow(id=stored.id, data=data, created_at=now))
            session.commit()
        return replace(stored, created_at=datetime.fromtimestamp(now, timezone.utc))

    def _to_project(self, row: "ProjectRow") -> Project:
        project = project_from_dict(row.data, project_id=row.id)
        project.created_at = datetime.fromtimestamp(row.created_at, timezone.utc)
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            return self._to_project(row) if row else None

    def list_projects(self, limit: int = 100) -> list[Project]:
        with self.Session() as session:
            stmt = (
                select(ProjectRow)
                .order_by(ProjectRow.created_at.desc())
                .limit(limit)
            )
            return [self._to_project(row) for row in session.execute(stmt).scalars()]


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    uid = Column(String, primary_key=True)
    data = Column(JSON, nullable=False)


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    data = Column(JSON, nullable=False)
    created_at = Column(Float, nullable=False, index=True)
