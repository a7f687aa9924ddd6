"""Journal repository — CRUD operations for the encrypted data bank.

The repository mediates between journal records (Symptom, SleepEntry,
Appointment) and the SQLite database, using FieldEncryptor for free-text
and photo fields. Analysis code never reads the store directly; it works on
the immutable ``JournalSnapshot`` returned by :meth:`JournalRepository.snapshot`.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from typing import Any

from medprep.core.storage.database import JournalDatabase
from medprep.core.storage.encryption import FieldEncryptor
from medprep.domains.journal.domain_logic.journal_models import (
    Appointment,
    JournalSnapshot,
    LifeImpact,
    PhotoRef,
    Region,
    SleepEntry,
    Symptom,
)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when repository operations fail."""


class JournalRepository:
    """CRUD repository for one user's symptoms, sleep entries and appointments.

    Usage::

        db = JournalDatabase(":memory:")
        db.initialize()
        encryptor = FieldEncryptor(key="...")
        repo = JournalRepository(db, encryptor)

        symptom_id = repo.add_symptom(symptom)
        snapshot = repo.snapshot()
    """

    def __init__(self, database: JournalDatabase, encryptor: FieldEncryptor) -> None:
        self._db = database
        self._enc = encryptor

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _now() -> datetime:
        return datetime.now().replace(microsecond=0)

    @staticmethod
    def _iso(moment: datetime) -> str:
        return moment.isoformat(timespec="seconds")

    # ------------------------------------------------------------------
    # Symptoms
    # ------------------------------------------------------------------

    def add_symptom(self, symptom: Symptom) -> str:
        """Persist a symptom with encrypted free text and photo.

        Args:
            symptom: The symptom to save. If ``symptom.id`` is empty, a UUID
                is generated; a missing ``created_at`` defaults to now.

        Returns:
            The symptom ID.
        """
        sid = symptom.id or self._new_id()
        created = symptom.created_at or self._now()
        photo = (
            {"data": symptom.photo.data, "filename": symptom.photo.filename}
            if symptom.photo is not None
            else None
        )

        self._db.connection.execute(
            """INSERT INTO symptoms (
                id, timestamp, region, type, severity,
                description_enc, notes_enc, photo_enc,
                life_impact_json, has_photo, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                sid,
                self._iso(symptom.timestamp),
                symptom.region.value,
                symptom.type,
                symptom.severity,
                self._enc.encrypt(symptom.description),
                self._enc.encrypt(symptom.notes or None),
                self._enc.encrypt(photo),
                json.dumps(symptom.life_impact.to_dict()) if symptom.life_impact else None,
                int(symptom.has_photo),
                self._iso(created),
            ),
        )
        self._db.connection.commit()
        logger.info(
            "Saved symptom %s (region=%s, severity=%d)", sid, symptom.region.value, symptom.severity
        )
        return sid

    def get_symptom(self, symptom_id: str) -> Symptom | None:
        row = self._db.connection.execute(
            "SELECT * FROM symptoms WHERE id = ?", (symptom_id,)
        ).fetchone()
        return self._row_to_symptom(row) if row is not None else None

    def get_symptoms(
        self,
        *,
        region: Region | None = None,
        since: datetime | None = None,
        limit: int | None = None,
    ) -> list[Symptom]:
        """Query symptoms, newest onset first.

        Args:
            region: Filter by body region.
            since: Onset lower bound (inclusive).
            limit: Maximum results to return.
        """
        conditions: list[str] = []
        params: list[Any] = []

        if region is not None:
            conditions.append("region = ?")
            params.append(region.value)
        if since is not None:
            conditions.append("timestamp >= ?")
            params.append(self._iso(since))

        query = "SELECT * FROM symptoms"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY timestamp DESC, created_at DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        rows = self._db.connection.execute(query, params).fetchall()
        return [self._row_to_symptom(row) for row in rows]

    def count_symptoms(self) -> int:
        row = self._db.connection.execute("SELECT COUNT(*) FROM symptoms").fetchone()
        return row[0]

    def count_photos(self) -> int:
        """Number of stored symptoms with a photo attached."""
        row = self._db.connection.execute(
            "SELECT COUNT(*) FROM symptoms WHERE has_photo = 1"
        ).fetchone()
        return row[0]

    def delete_symptom(self, symptom_id: str) -> bool:
        """Delete a single symptom.

        Returns:
            True if a symptom was found and deleted, False otherwise.
        """
        cursor = self._db.connection.execute(
            "DELETE FROM symptoms WHERE id = ?", (symptom_id,)
        )
        self._db.connection.commit()
        if cursor.rowcount == 0:
            return False
        logger.info("Deleted symptom %s", symptom_id)
        return True

    # ------------------------------------------------------------------
    # Sleep entries
    # ------------------------------------------------------------------

    def add_sleep_entry(self, entry: SleepEntry) -> str:
        eid = entry.id or self._new_id()
        created = entry.created_at or self._now()
        self._db.connection.execute(
            """INSERT INTO sleep_entries (id, bedtime, waketime, quality, notes_enc, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                eid,
                self._iso(entry.bedtime),
                self._iso(entry.waketime),
                entry.quality,
                self._enc.encrypt(entry.notes or None),
                self._iso(created),
            ),
        )
        self._db.connection.commit()
        if entry.duration <= 0:
            logger.warning(
                "Sleep entry %s has non-positive duration (%.1fh)", eid, entry.duration
            )
        logger.info("Saved sleep entry %s (quality=%d)", eid, entry.quality)
        return eid

    def get_sleep_entries(self, *, limit: int | None = None) -> list[SleepEntry]:
        """Sleep entries, latest bedtime first."""
        query = "SELECT * FROM sleep_entries ORDER BY bedtime DESC, created_at DESC"
        params: list[Any] = []
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        rows = self._db.connection.execute(query, params).fetchall()
        return [self._row_to_sleep_entry(row) for row in rows]

    def count_sleep_entries(self) -> int:
        row = self._db.connection.execute("SELECT COUNT(*) FROM sleep_entries").fetchone()
        return row[0]

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def add_appointment(self, appointment: Appointment) -> str:
        aid = appointment.id or self._new_id()
        created = appointment.created_at or self._now()
        self._db.connection.execute(
            """INSERT INTO appointments (id, doctor, scheduled_at, reason_enc, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                aid,
                appointment.doctor,
                self._iso(appointment.scheduled_at),
                self._enc.encrypt(appointment.reason or None),
                self._iso(created),
            ),
        )
        self._db.connection.commit()
        logger.info("Saved appointment %s", aid)
        return aid

    def get_appointments(self) -> list[Appointment]:
        """Appointments, most recently created first."""
        rows = self._db.connection.execute(
            "SELECT * FROM appointments ORDER BY created_at DESC"
        ).fetchall()
        return [self._row_to_appointment(row) for row in rows]

    def count_appointments(self) -> int:
        row = self._db.connection.execute("SELECT COUNT(*) FROM appointments").fetchone()
        return row[0]

    # ------------------------------------------------------------------
    # Snapshot / bulk deletion
    # ------------------------------------------------------------------

    def snapshot(self) -> JournalSnapshot:
        """Immutable copy of the journal for one analysis pass."""
        return JournalSnapshot(
            symptoms=tuple(self.get_symptoms()),
            sleep_entries=tuple(self.get_sleep_entries()),
            appointments=tuple(self.get_appointments()),
        )

    def delete_all_data(self) -> dict[str, int]:
        """Delete ALL journal data.

        Returns:
            Rows deleted per kind: ``symptoms``, ``appointments``,
            ``sleep_entries``.
        """
        counts = {
            "symptoms": self.count_symptoms(),
            "appointments": self.count_appointments(),
            "sleep_entries": self.count_sleep_entries(),
        }
        conn = self._db.connection
        conn.execute("DELETE FROM symptoms")
        conn.execute("DELETE FROM appointments")
        conn.execute("DELETE FROM sleep_entries")
        conn.commit()
        logger.warning("Deleted ALL journal data: %s", counts)
        return counts

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _row_to_symptom(self, row: Any) -> Symptom:
        try:
            region = Region(row["region"])
        except ValueError as exc:
            raise RepositoryError(f"Stored symptom {row['id']} has unknown region") from exc

        life_impact = None
        if row["life_impact_json"]:
            life_impact = LifeImpact.from_mapping(json.loads(row["life_impact_json"]))

        photo = None
        photo_data = self._enc.decrypt(row["photo_enc"])
        if photo_data:
            photo = PhotoRef(data=photo_data["data"], filename=photo_data.get("filename"))

        return Symptom(
            id=row["id"],
            region=region,
            type=row["type"],
            description=self._enc.decrypt(row["description_enc"]) or "",
            severity=row["severity"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
            notes=self._enc.decrypt(row["notes_enc"]) or "",
            life_impact=life_impact,
            photo=photo,
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_sleep_entry(self, row: Any) -> SleepEntry:
        return SleepEntry(
            id=row["id"],
            bedtime=datetime.fromisoformat(row["bedtime"]),
            waketime=datetime.fromisoformat(row["waketime"]),
            quality=row["quality"],
            notes=self._enc.decrypt(row["notes_enc"]) or "",
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_appointment(self, row: Any) -> Appointment:
        return Appointment(
            id=row["id"],
            doctor=row["doctor"],
            scheduled_at=datetime.fromisoformat(row["scheduled_at"]),
            reason=self._enc.decrypt(row["reason_enc"]) or "",
            created_at=datetime.fromisoformat(row["created_at"]),
        )
