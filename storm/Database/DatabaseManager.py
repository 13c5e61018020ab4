from __future__ import annotations

from typing import Any, Dict, Iterator, Optional
import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, event, Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool


class DatabaseManager:
    """
    Laravel-style Database Manager for named connections.

    Holds one engine and one long lived session per connection name. Storm is
    request scoped and synchronous, so a session is shared by every model of
    the connection until ``purge()`` is called.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        if config is None:
            from storm.Config.Repository import config as config_value
            config = config_value('database', {})
        self._config: Dict[str, Any] = config
        self._default_connection: str = config.get('default', 'sqlite')
        self._engines: Dict[str, Engine] = {}
        self._sessions: Dict[str, Session] = {}
        self.logger = logging.getLogger(f"storm.{self.__class__.__name__}")

    def get_default_connection(self) -> str:
        return self._default_connection

    def set_default_connection(self, name: str) -> None:
        self._default_connection = name

    def engine(self, name: Optional[str] = None) -> Engine:
        """Get (and lazily create) the engine of a connection."""
        name = name or self._default_connection

        if name not in self._engines:
            self._engines[name] = self._make_engine(name)

        return self._engines[name]

    def _make_engine(self, name: str) -> Engine:
        connections = self._config.get('connections', {})
        if name not in connections:
            raise ValueError(f"Database connection [{name}] not configured")

        config = connections[name]
        driver = config.get('driver', 'sqlite')
        options: Dict[str, Any] = {'echo': config.get('echo', False)}

        if driver == 'sqlite':
            database = config.get('database', ':memory:')
            options['connect_args'] = {'check_same_thread': False}
            if database == ':memory:':
                # One shared connection, otherwise every checkout sees an empty database
                options['poolclass'] = StaticPool
                url = 'sqlite://'
            else:
                url = f"sqlite:///{database}"
        elif driver == 'postgresql':
            url = (
                f"postgresql://{config.get('username')}:{config.get('password')}"
                f"@{config.get('host')}:{config.get('port')}/{config.get('database')}"
            )
        elif driver == 'mysql':
            url = (
                f"mysql://{config.get('username')}:{config.get('password')}"
                f"@{config.get('host')}:{config.get('port')}/{config.get('database')}"
                f"?charset={config.get('charset', 'utf8mb4')}"
            )
        else:
            raise ValueError(f"Unsupported database driver [{driver}]")

        engine = create_engine(url, **options)

        if driver == 'sqlite' and config.get('foreign_key_constraints'):
            @event.listens_for(engine, 'connect')
            def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
                del connection_record
                cursor = dbapi_connection.cursor()
                cursor.execute('PRAGMA foreign_keys=ON')
                cursor.close()

        self.logger.debug("Created engine for connection %s (%s)", name, driver)
        return engine

    def session(self, name: Optional[str] = None) -> Session:
        """Get the session of a connection."""
        name = name or self._default_connection

        if name not in self._sessions:
            factory = sessionmaker(bind=self.engine(name), autoflush=False)
            self._sessions[name] = factory()

        return self._sessions[name]

    @contextmanager
    def transaction(self, name: Optional[str] = None) -> Iterator[Session]:
        """
        Run a block in a transaction.

        Nested blocks join the outermost one; only the outermost block commits,
        and any failure rolls the whole unit back.
        """
        session = self.session(name)
        depth = session.info.get('transaction_depth', 0)
        session.info['transaction_depth'] = depth + 1

        try:
            yield session
            if depth == 0:
                session.commit()
        except Exception:
            if depth == 0:
                session.rollback()
            raise
        finally:
            session.info['transaction_depth'] = depth

    def create_all(self, name: Optional[str] = None) -> None:
        """Create every table known to the model metadata."""
        from storm.Database.Model import Base
        Base.metadata.create_all(self.engine(name))

    def drop_all(self, name: Optional[str] = None) -> None:
        from storm.Database.Model import Base
        Base.metadata.drop_all(self.engine(name))

    def purge(self, name: Optional[str] = None) -> None:
        """Close sessions and dispose engines."""
        names = [name] if name else list(set(self._sessions) | set(self._engines))

        for connection in names:
            session = self._sessions.pop(connection, None)
            if session is not None:
                session.close()
            engine = self._engines.pop(connection, None)
            if engine is not None:
                engine.dispose()


# Global database manager instance
database_manager_instance: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global database_manager_instance
    if database_manager_instance is None:
        database_manager_instance = DatabaseManager()
    return database_manager_instance


def set_database_manager(manager: Optional[DatabaseManager]) -> None:
    global database_manager_instance
    database_manager_instance = manager
