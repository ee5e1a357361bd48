"""Backup orchestration: connect, dump, upload, disconnect.

One ``BackupOrchestrator.run()`` call is one invocation of the state
machine::

    IDLE -> CONNECTING -> DUMPING -> UPLOADING -> DONE
                 \\            \\            \\
                  +------------+------------+--> FAILED

Every step is awaited in sequence; nothing is retried.  The database
connection is closed exactly once on every exit path, and a failure while
closing never replaces the error that caused the failure.

Usage:
    from db_backup.backup.orchestrator import BackupOrchestrator

    result = await BackupOrchestrator(config).run()
    if result.success:
        print(result.filename)
    else:
        print(result.error)
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from db_backup.adapters.base import DatabaseConnection
from db_backup.adapters.postgres import database_name_from_url
from db_backup.backup.dump import DumpBuilder
from db_backup.backup.models import BackupResult, BackupState
from db_backup.backup.naming import BACKUP_PREFIX, backup_date, next_filename
from db_backup.config.models import BackupConfig
from db_backup.factory import create_connection, create_sink
from db_backup.schema.inspector import SchemaInspector
from db_backup.storage.base import ObjectMetadata, StorageSink

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[BackupConfig], DatabaseConnection]
Clock = Callable[[], datetime]

DEFAULT_LIST_LIMIT = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _close_quietly(connection: DatabaseConnection) -> None:
    try:
        await connection.close()
    except Exception as e:
        logger.warning("Error while closing database connection: %s", e)


class BackupOrchestrator:
    """Runs one backup from connection to upload.

    The orchestrator keeps no state between ``run()`` calls; all
    per-invocation state lives in the returned ``BackupResult``.

    Args:
        config: Backup configuration.
        connection_factory: Builds an unconnected ``DatabaseConnection``
            from the config (defaults to ``create_connection``).
        sink: Storage sink; built from ``config.storage`` when omitted.
        clock: Returns the current time (defaults to UTC now).
    """

    def __init__(
        self,
        config: BackupConfig,
        connection_factory: ConnectionFactory | None = None,
        sink: StorageSink | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._connection_factory = connection_factory or create_connection
        self._sink = sink
        self._clock = clock or _utcnow

    async def run(self) -> BackupResult:
        """Execute the backup state machine once.

        Returns:
            ``BackupResult`` in state ``DONE`` (with ``filename``) or
            ``FAILED`` (with ``error``).  Exceptions are not raised.
        """
        transitions: list[BackupState] = [BackupState.IDLE]

        def enter(state: BackupState) -> None:
            logger.debug("Backup state: %s -> %s", transitions[-1].value, state.value)
            transitions.append(state)

        config = self._config
        now = self._clock()
        filename = next_filename(now)
        database = database_name_from_url(config.database_url)
        connection: DatabaseConnection | None = None

        try:
            enter(BackupState.CONNECTING)
            logger.info("Starting backup of database '%s'", database)
            connection = self._connection_factory(config)
            await connection.connect()

            enter(BackupState.DUMPING)
            inspector = SchemaInspector(connection, excluded_tables=set(config.exclude_tables))
            builder = DumpBuilder(inspector, database=database, batch_size=config.batch_size)
            artifact = await builder.build(config.schema_name, now=now)

            # The artifact is complete; the connection is not needed for upload.
            await _close_quietly(connection)
            connection = None

            enter(BackupState.UPLOADING)
            logger.info("Uploading %s", filename)
            sink = self._sink if self._sink is not None else create_sink(config.storage)
            metadata = ObjectMetadata(
                custom={"backup-date": backup_date(now), "database": database},
            )
            await sink.put(filename, artifact.to_bytes(), metadata)
        except Exception as e:
            enter(BackupState.FAILED)
            logger.error("Backup failed: %s", e)
            return BackupResult(
                success=False,
                state=BackupState.FAILED,
                database=database,
                error=str(e),
                transitions=transitions,
            )
        finally:
            if connection is not None:
                await _close_quietly(connection)

        enter(BackupState.DONE)
        logger.info("Backup uploaded successfully: %s", filename)
        logger.info("Backup size: %.2f KB", artifact.size_bytes / 1024)
        return BackupResult(
            success=True,
            state=BackupState.DONE,
            filename=filename,
            database=database,
            size_bytes=artifact.size_bytes,
            table_count=len(artifact.tables),
            transitions=transitions,
        )


async def list_backups(sink: StorageSink, limit: int = DEFAULT_LIST_LIMIT) -> list[str]:
    """List stored backup keys (single bounded page, oldest first).

    Raises:
        StorageError: If the sink rejects the listing.
    """
    return await sink.list(BACKUP_PREFIX, limit)


async def scheduled_backup(
    config: BackupConfig,
    connection_factory: ConnectionFactory | None = None,
    sink: StorageSink | None = None,
) -> BackupResult:
    """Entry point for scheduled runs.  Failures are logged, never raised."""
    result = await BackupOrchestrator(
        config, connection_factory=connection_factory, sink=sink
    ).run()
    if result.success:
        logger.info("Scheduled backup completed: %s", result.filename)
    else:
        logger.error("Scheduled backup failed: %s", result.error)
    return result
