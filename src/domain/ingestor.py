"""Ingest one replay file into the demo graph.

Stages run in a fixed order (size check, parse, dedup, map, demo, ally
teams, participants, AIs). Everything from the dedup delete to the last AI
row is written inside one transaction: a failure at any point leaves the
database exactly as it was before the attempt, and a unique-constraint
violation (for instance a concurrent ingest of the same game) surfaces as
StorageConflict instead of a half-written demo.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    StatementError,
)
from sqlalchemy.orm import Session, sessionmaker

from domain.config import IngestConfig
from domain.errors import (
    DemoIngestError,
    IngestStage,
    ParseFailure,
    StorageConflict,
    StorageUnavailable,
)
from domain.parser import ReplayParser
from domain.preset import classify_preset
from domain.replay import DemoRecord
from domain.size_guard import ensure_file_within_limit
from logging_config import get_logger
from models import AllyTeam, Demo
from repositories.demo_repository import (
    create_ai,
    create_ally_teams,
    create_demo,
    create_player,
    create_spectator,
    delete_demo,
)
from repositories.entity_repository import ensure_alias, find_or_create_map, upsert_user

logger = get_logger(__name__)


@dataclass(frozen=True)
class IngestSummary:
    """What one successful ingestion wrote."""

    game_id: str
    file_name: str
    map_script_name: str
    preset: str
    replaced: bool
    ally_teams: int
    players: int
    spectators: int
    ais: int


class _StageTracker:
    def __init__(self) -> None:
        self.stage = IngestStage.DEDUPING


class DemoIngestor:
    """Run the ingest pipeline with an injected parser and session factory."""

    def __init__(
        self,
        *,
        parser: ReplayParser,
        session_factory: sessionmaker[Session],
        config: IngestConfig | None = None,
    ) -> None:
        self.parser = parser
        self.session_factory = session_factory
        self.config = config or IngestConfig()

    def ingest(self, file_path: Path | str) -> IngestSummary:
        """Ingest one file. Raises a DemoIngestError subclass on failure."""
        file_path = Path(file_path)
        logger.debug("demo_ingest_started", file=file_path.name)
        try:
            self._validate(file_path)
            record = self._parse(file_path)
            summary = self._persist(file_path, record)
        except DemoIngestError as exc:
            if exc.file_path is None:
                exc.file_path = file_path
            logger.warning(
                "demo_ingest_failed",
                file=file_path.name,
                error=type(exc).__name__,
                stage=None if exc.stage is None else exc.stage.value,
                retryable=exc.retryable,
                message=str(exc),
            )
            raise

        logger.info(
            "demo_ingested",
            file=summary.file_name,
            game_id=summary.game_id,
            map=summary.map_script_name,
            preset=summary.preset,
            replaced=summary.replaced,
            ally_teams=summary.ally_teams,
            players=summary.players,
            spectators=summary.spectators,
            ais=summary.ais,
        )
        return summary

    def _validate(self, file_path: Path) -> None:
        try:
            ensure_file_within_limit(file_path, self.config.max_file_size_bytes)
        except OSError as exc:
            raise ParseFailure(
                f"Could not read replay: {exc}",
                file_path=file_path,
                stage=IngestStage.VALIDATING,
            ) from exc

    def _parse(self, file_path: Path) -> DemoRecord:
        try:
            return self.parser.parse_file(file_path)
        except DemoIngestError:
            raise
        except Exception as exc:
            raise ParseFailure(
                f"Replay parser failed: {exc}",
                file_path=file_path,
                stage=IngestStage.PARSING,
            ) from exc

    def _persist(self, file_path: Path, record: DemoRecord) -> IngestSummary:
        tracker = _StageTracker()
        try:
            with self.session_factory() as session, session.begin():
                return self._write_demo_graph(session, file_path, record, tracker)
        except IntegrityError as exc:
            raise StorageConflict(
                f"Conflicting write for game {record.game_id}",
                file_path=file_path,
                stage=tracker.stage,
            ) from exc
        except (OperationalError, InterfaceError) as exc:
            raise StorageUnavailable(
                f"Database unavailable: {exc.orig!r}",
                file_path=file_path,
                stage=tracker.stage,
            ) from exc
        except DataError as exc:
            raise ParseFailure(
                f"Replay value rejected by the database: {exc.orig!r}",
                file_path=file_path,
                stage=tracker.stage,
            ) from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                raise StorageUnavailable(
                    f"Database connection lost: {exc.orig!r}",
                    file_path=file_path,
                    stage=tracker.stage,
                ) from exc
            raise DemoIngestError(
                f"Database rejected write for game {record.game_id}: {exc.orig!r}",
                file_path=file_path,
                stage=tracker.stage,
            ) from exc
        except StatementError as exc:
            # Parameter conversion failed before reaching the driver.
            raise ParseFailure(
                f"Replay value could not be bound: {exc.orig!r}",
                file_path=file_path,
                stage=tracker.stage,
            ) from exc
        except (OverflowError, ValueError, TypeError) as exc:
            raise ParseFailure(
                f"Replay value out of range for storage: {exc}",
                file_path=file_path,
                stage=tracker.stage,
            ) from exc

    def _write_demo_graph(
        self,
        session: Session,
        file_path: Path,
        record: DemoRecord,
        tracker: _StageTracker,
    ) -> IngestSummary:
        game_id = record.game_id

        tracker.stage = IngestStage.DEDUPING
        replaced = delete_demo(session, game_id)
        if replaced:
            logger.info("demo_replaced", game_id=game_id, file=file_path.name)

        tracker.stage = IngestStage.PERSISTING_MAP
        map_row = find_or_create_map(session, record.map_script_name)

        tracker.stage = IngestStage.PERSISTING_DEMO
        preset = classify_preset(len(record.ally_teams), len(record.players) + len(record.ais))
        demo = create_demo(
            session,
            map_row=map_row,
            record=record,
            file_name=file_path.name,
            preset=preset.value,
        )

        tracker.stage = IngestStage.PERSISTING_ALLY_TEAMS
        ally_teams = create_ally_teams(session, demo=demo, record=record)

        tracker.stage = IngestStage.PERSISTING_PARTICIPANTS
        players = 0
        spectators = 0
        for participant in record.participants:
            user = None
            if participant.user_id is None:
                logger.debug("participant_without_user", game_id=game_id, player_id=participant.player_id)
            else:
                user = upsert_user(session, participant)
                ensure_alias(session, user, participant.name)

            if participant.is_player:
                ally_team = _ally_team_for(ally_teams, participant.ally_team_id, demo, tracker.stage)
                create_player(session, ally_team=ally_team, user=user, record=participant)
                players += 1
            else:
                create_spectator(session, demo=demo, user=user, record=participant)
                spectators += 1

        tracker.stage = IngestStage.PERSISTING_AIS
        for ai_record in record.ais:
            ally_team = _ally_team_for(ally_teams, ai_record.ally_team_id, demo, tracker.stage)
            create_ai(session, ally_team=ally_team, record=ai_record)

        tracker.stage = IngestStage.COMPLETE
        return IngestSummary(
            game_id=game_id,
            file_name=file_path.name,
            map_script_name=map_row.script_name,
            preset=preset.value,
            replaced=replaced,
            ally_teams=len(ally_teams),
            players=players,
            spectators=spectators,
            ais=len(record.ais),
        )


def _ally_team_for(
    ally_teams: dict[int, AllyTeam],
    ally_team_id: int | None,
    demo: Demo,
    stage: IngestStage,
) -> AllyTeam:
    if ally_team_id is None or ally_team_id not in ally_teams:
        raise ParseFailure(
            f"Demo {demo.id} references unknown ally team {ally_team_id}",
            stage=stage,
        )
    return ally_teams[ally_team_id]


def ingest_demo_file(
    file_path: Path | str,
    *,
    parser: ReplayParser,
    session_factory: sessionmaker[Session],
    config: IngestConfig | None = None,
) -> IngestSummary:
    """Ingest a single file with a one-off DemoIngestor."""
    ingestor = DemoIngestor(parser=parser, session_factory=session_factory, config=config)
    return ingestor.ingest(file_path)


__all__ = ["DemoIngestor", "IngestSummary", "ingest_demo_file"]
