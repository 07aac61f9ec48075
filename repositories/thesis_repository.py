"""
Thesis repository for database operations.
"""
import logging
from typing import List, Optional
from sqlalchemy import or_, update, select, case
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.thesis import Thesis, ThesisChain
from models.timestamps import utcnow

logger = logging.getLogger(__name__)


class ThesisRepository(BaseRepository[Thesis]):
    """Repository for Thesis entity operations."""

    not_found_message = "Thesis not found"

    def __init__(self):
        """Initialize ThesisRepository."""
        super().__init__(Thesis)

    def create_thesis(
        self,
        session: Session,
        student_name: str,
        student_id: str,
        department: str,
        file_url: str,
        supervisor_id: int,
        status: str,
        version: int = 1,
        is_resubmission: bool = False,
        parent_thesis_id: Optional[int] = None,
        original_submission_id: Optional[int] = None,
        submission_history: Optional[list] = None
    ) -> Thesis:
        """
        Create a new thesis record.

        Args:
            session: Database session
            student_name: Student display name
            student_id: Student identifier
            department: Department name
            file_url: Opaque URL of the uploaded document
            supervisor_id: ID of the supervising faculty user
            status: Initial status
            version: Version number within the chain
            is_resubmission: Whether this record answers a resubmission request
            parent_thesis_id: Immediate prior version
            original_submission_id: First version of the chain
            submission_history: Starting history entries

        Returns:
            Created thesis instance
        """
        now = utcnow()
        thesis = Thesis(
            student_name=student_name,
            student_id=student_id,
            department=department,
            file_url=file_url,
            supervisor_id=supervisor_id,
            status=status,
            version=version,
            is_resubmission=is_resubmission,
            parent_thesis_id=parent_thesis_id,
            original_submission_id=original_submission_id,
            resubmission_requested=False,
            submission_history=list(submission_history or []),
            created_at=now,
            updated_at=now
        )
        session.add(thesis)
        session.flush()
        return thesis

    def get_any_for_student(self, session: Session, student_id: str) -> Optional[Thesis]:
        """Get any thesis (of any version) submitted under a student ID."""
        return session.query(Thesis).filter_by(student_id=student_id).first()

    def get_latest_for_student(self, session: Session, student_id: str) -> Optional[Thesis]:
        """
        Get the most recent thesis for a student.

        Ordered by version, then creation time, then id, all descending.
        """
        return session.query(Thesis).filter_by(student_id=student_id).order_by(
            Thesis.version.desc(),
            Thesis.created_at.desc(),
            Thesis.id.desc()
        ).first()

    def get_requested_for_student(self, session: Session, student_id: str) -> Optional[Thesis]:
        """Get the thesis that currently carries an open resubmission request."""
        return session.query(Thesis).filter_by(
            student_id=student_id,
            resubmission_requested=True
        ).order_by(Thesis.version.desc()).first()

    def find_versions_after(
        self,
        session: Session,
        parent_thesis_id: int,
        chain_root_id: int
    ) -> List[Thesis]:
        """
        Find records that follow a thesis in its chain.

        Args:
            session: Database session
            parent_thesis_id: Records whose immediate parent is this ID
            chain_root_id: Records that belong to this chain

        Returns:
            Matching thesis records
        """
        return session.query(Thesis).filter(
            or_(
                Thesis.parent_thesis_id == parent_thesis_id,
                Thesis.original_submission_id == chain_root_id
            )
        ).all()

    def get_chain(self, session: Session, chain_root_id: int) -> List[Thesis]:
        """
        Get every version of a chain, newest version first.

        Args:
            session: Database session
            chain_root_id: ID of the first version

        Returns:
            Thesis records sorted by version descending
        """
        return session.query(Thesis).filter(
            or_(
                Thesis.id == chain_root_id,
                Thesis.original_submission_id == chain_root_id,
                Thesis.parent_thesis_id == chain_root_id
            )
        ).order_by(Thesis.version.desc(), Thesis.id.desc()).all()

    def list_all(self, session: Session) -> List[Thesis]:
        return session.query(Thesis).order_by(Thesis.created_at.desc(), Thesis.id.desc()).all()

    def list_by_supervisor(self, session: Session, supervisor_id: int) -> List[Thesis]:
        return session.query(Thesis).filter_by(supervisor_id=supervisor_id).order_by(
            Thesis.created_at.desc(), Thesis.id.desc()
        ).all()


class ThesisChainRepository(BaseRepository[ThesisChain]):
    """Repository for per-chain version counters."""

    def __init__(self):
        """Initialize ThesisChainRepository."""
        super().__init__(ThesisChain)

    def _ensure_counter(self, session: Session, chain_root_id: int, floor: int) -> None:
        """Create the counter row for a chain unless it already exists."""
        dialect = session.get_bind().dialect.name
        values = dict(chain_root_id=chain_root_id, last_version=floor, updated_at=utcnow())

        if dialect in ('postgresql', 'sqlite'):
            if dialect == 'postgresql':
                from sqlalchemy.dialects.postgresql import insert
            else:
                from sqlalchemy.dialects.sqlite import insert
            session.execute(
                insert(ThesisChain).values(**values).on_conflict_do_nothing(
                    index_elements=['chain_root_id']
                )
            )
            return

        exists = session.query(ThesisChain.chain_root_id).filter(
            ThesisChain.chain_root_id == chain_root_id
        ).first()
        if not exists:
            session.add(ThesisChain(**values))
            session.flush()

    def allocate_next_version(self, session: Session, chain_root_id: int, floor: int) -> int:
        """
        Atomically allocate the next version number of a chain.

        The counter is raised to at least ``floor`` and then incremented in
        a single UPDATE, so two transactions allocating on the same chain
        are serialised by the row lock and never receive the same number.

        Args:
            session: Database session (the caller's transaction)
            chain_root_id: ID of the first version of the chain
            floor: Highest version already present in the chain

        Returns:
            The newly allocated version number
        """
        self._ensure_counter(session, chain_root_id, floor)

        session.execute(
            update(ThesisChain)
            .where(ThesisChain.chain_root_id == chain_root_id)
            .values(
                last_version=case(
                    (ThesisChain.last_version < floor, floor),
                    else_=ThesisChain.last_version
                ) + 1,
                updated_at=utcnow()
            )
            .execution_options(synchronize_session=False)
        )

        version = session.execute(
            select(ThesisChain.last_version).where(ThesisChain.chain_root_id == chain_root_id)
        ).scalar_one()

        logger.debug(f"Allocated version {version} for chain {chain_root_id}")
        return version
