# tubely/di/dependencies.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
from datetime import timedelta
from typing import Optional
import logging

from tubely.config import AppConfig
from tubely.db.models import Base
from tubely.processors.faststart import FFmpegFastStartRemuxer, MediaRemuxer
from tubely.processors.media_probe import FFprobeInspector, MediaInspector
from tubely.repositories.relational_db.video_repository_impl import VideoRepositoryImpl
from tubely.repositories.video_repository import VideoRepository
from tubely.services.object_storage import ObjectStore, S3ObjectStore
from tubely.services.url_signer import AccessUrlIssuer
from tubely.usecases.video_usecase import VideoUseCase

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages database connections and sessions"""

    def __init__(self, config: AppConfig):
        self.config: AppConfig = config
        self._engine = None
        self._session_factory = None
        self._initialize_database()

    def _initialize_database(self):
        """Initialize database engine and session factory"""
        db = self.config.database
        try:
            url = db.connection_string
            if db.is_sqlite:
                logger.info(f"Initializing SQLite database: {url}")
                engine_kwargs = {"connect_args": {"check_same_thread": False}}
                if url in ("sqlite://", "sqlite:///:memory:"):
                    # one shared connection, otherwise each session sees its own empty DB
                    engine_kwargs["poolclass"] = StaticPool
            else:
                logger.info(f"Initializing database connection to: {db.postgres.db_host}")
                engine_kwargs = {
                    "poolclass": QueuePool,
                    "pool_size": db.max_connections,
                    "max_overflow": 10,
                    "pool_timeout": db.connection_timeout,
                    "pool_recycle": 3600,  # Recycle connections after 1 hour
                    "connect_args": {"connect_timeout": db.connection_timeout},
                }

            self._engine = create_engine(url, echo=db.echo or self.config.debug, **engine_kwargs)
            self._session_factory = sessionmaker(
                bind=self._engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
            logger.info("Database initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    @property
    def engine(self):
        """Get database engine"""
        return self._engine

    def create_tables(self):
        Base.metadata.create_all(bind=self._engine)
        logger.info("Database tables created")

    def get_session(self) -> Session:
        """Get a new database session"""
        if not self._session_factory:
            raise RuntimeError("Database not initialized")
        return self._session_factory()

    def close(self):
        """Close database connections"""
        if self._engine:
            self._engine.dispose()
            logger.info("Database connections closed")


class DependencyContainer:
    """Builds the service graph from one AppConfig; pass it explicitly, no globals"""

    def __init__(
        self,
        config: AppConfig,
        object_store: Optional[ObjectStore] = None,
        inspector: Optional[MediaInspector] = None,
        remuxer: Optional[MediaRemuxer] = None,
    ):
        self.config = config
        self.db_manager = DatabaseManager(config)
        self.db_manager.create_tables()

        self._video_repository: Optional[VideoRepository] = None
        self._object_store = object_store
        self._inspector = inspector
        self._remuxer = remuxer
        self._url_issuer: Optional[AccessUrlIssuer] = None
        self._video_usecase: Optional[VideoUseCase] = None

        logger.info("Dependency container initialized")

    def get_video_repository(self) -> VideoRepository:
        if self._video_repository is None:
            self._video_repository = VideoRepositoryImpl(self.db_manager.get_session)
        return self._video_repository

    def get_object_store(self) -> ObjectStore:
        """Single S3 client shared across requests"""
        if self._object_store is None:
            self._object_store = S3ObjectStore(self.config.storage)
            logger.info(f"S3 client initialized for bucket {self.config.storage.bucket} ({self.config.storage.region})")
        return self._object_store

    def get_media_inspector(self) -> MediaInspector:
        if self._inspector is None:
            media = self.config.media
            self._inspector = FFprobeInspector(media.ffprobe_path, media.probe_timeout_seconds)
        return self._inspector

    def get_media_remuxer(self) -> MediaRemuxer:
        if self._remuxer is None:
            media = self.config.media
            self._remuxer = FFmpegFastStartRemuxer(media.ffmpeg_path, media.remux_timeout_seconds)
        return self._remuxer

    def get_url_issuer(self) -> AccessUrlIssuer:
        if self._url_issuer is None:
            ttl = timedelta(seconds=self.config.media.video_url_ttl_seconds)
            self._url_issuer = AccessUrlIssuer(self.get_object_store(), ttl)
        return self._url_issuer

    def get_video_usecase(self) -> VideoUseCase:
        if self._video_usecase is None:
            self._video_usecase = VideoUseCase(
                config=self.config,
                video_repository=self.get_video_repository(),
                object_store=self.get_object_store(),
                inspector=self.get_media_inspector(),
                remuxer=self.get_media_remuxer(),
                url_issuer=self.get_url_issuer(),
            )
            logger.info("Video usecase initialized")
        return self._video_usecase

    def close(self):
        """Close all resources"""
        self.db_manager.close()
        self._video_repository = None
        self._video_usecase = None
