# tubely/api/fastapi_server.py
from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID
import uvicorn

from tubely.api.limits import BodySizeLimitMiddleware
from tubely.config import AppConfig
from tubely.helpers.assets import ensure_assets_dir
from tubely.helpers.auth import get_bearer_token, validate_jwt
from tubely.models.errors import TubelyError, ValidationError
from tubely.models.video import VideoView
from tubely.usecases.video_usecase import VideoUseCase

logger = logging.getLogger(__name__)

VIDEO_UPLOAD_PREFIX = "/api/video_upload/"


@dataclass
class CreateVideoRequest:
    title: str
    description: str = ""


def parse_media_type(value: Optional[str]) -> str:
    """'video/mp4; codecs=avc1' -> 'video/mp4'"""
    media_type = (value or "").split(";", 1)[0].strip().lower()
    if not media_type or " " in media_type or media_type.count("/") != 1:
        raise ValidationError("Couldn't parse media type")
    main_type, sub_type = media_type.split("/")
    if not main_type or not sub_type:
        raise ValidationError("Couldn't parse media type")
    return media_type


def parse_video_id(value: str) -> UUID:
    if not value:
        raise ValidationError("Missing videoID")
    try:
        return UUID(value)
    except ValueError as e:
        raise ValidationError("Invalid videoID", e) from e


class TubelyAPIServer:
    """HTTP API for video records, thumbnail and video uploads"""

    def __init__(self, config: AppConfig, video_usecase: VideoUseCase):
        self.config = config
        self.video_usecase = video_usecase
        self.app = FastAPI(
            title="Tubely API",
            description="Video records with local thumbnails and S3-backed video playback",
            version="1.0.0",
        )
        self.server = None

        self.app.add_middleware(
            BodySizeLimitMiddleware,
            max_body_size=config.media.max_video_upload_bytes,
            path_prefixes=(VIDEO_UPLOAD_PREFIX,),
        )
        self._setup_exception_handlers()
        self._setup_routes()
        self._setup_static_files()

    def _setup_static_files(self):
        """Serve thumbnails written under the assets root"""
        ensure_assets_dir(self.config.storage.assets_root)
        self.app.mount("/assets", StaticFiles(directory=self.config.storage.assets_root), name="assets")

    def _setup_exception_handlers(self):
        @self.app.exception_handler(TubelyError)
        async def handle_tubely_error(request: Request, exc: TubelyError):
            if exc.status_code >= 500:
                logger.error(f"Responding with 5XX error: {exc.message}: {exc.cause}")
            else:
                logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
            return JSONResponse({"error": exc.message}, status_code=exc.status_code)

        @self.app.exception_handler(StarletteHTTPException)
        async def handle_http_error(request: Request, exc: StarletteHTTPException):
            return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

        @self.app.exception_handler(RequestValidationError)
        async def handle_request_validation(request: Request, exc: RequestValidationError):
            return JSONResponse({"error": "Couldn't decode parameters"}, status_code=status.HTTP_400_BAD_REQUEST)

    def _authenticate(self, request: Request) -> UUID:
        token = get_bearer_token(request.headers)
        return validate_jwt(token, self.config.auth)

    async def _read_form_file(self, request: Request, field_name: str, error: str):
        try:
            form = await request.form()
        except StarletteHTTPException as e:
            raise ValidationError(error, e) from e
        upload = form.get(field_name)
        if not isinstance(upload, UploadFile):
            await form.close()
            raise ValidationError(error)
        return form, upload

    def _setup_routes(self):
        """Setup FastAPI routes"""
        usecase = self.video_usecase

        @self.app.get("/api/healthz")
        async def healthz():
            return {"status": "ok"}

        @self.app.post("/api/videos", response_model=VideoView, status_code=status.HTTP_201_CREATED)
        async def create_video(body: CreateVideoRequest, request: Request):
            """Create an empty video record owned by the caller"""
            user_id = self._authenticate(request)
            return await run_in_threadpool(usecase.create_video, user_id, body.title, body.description)

        @self.app.get("/api/videos", response_model=List[VideoView])
        async def list_videos(request: Request):
            """List the caller's videos with fresh playback URLs"""
            user_id = self._authenticate(request)
            return await run_in_threadpool(usecase.list_videos, user_id)

        @self.app.get("/api/videos/{video_id}", response_model=VideoView)
        async def get_video(video_id: str):
            return await run_in_threadpool(usecase.get_video, parse_video_id(video_id))

        @self.app.delete("/api/videos/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_video(video_id: str, request: Request):
            user_id = self._authenticate(request)
            await run_in_threadpool(usecase.delete_video, parse_video_id(video_id), user_id)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        @self.app.post("/api/thumbnail_upload/{video_id}", response_model=VideoView)
        async def upload_thumbnail(video_id: str, request: Request):
            """Attach a PNG/JPEG thumbnail stored on local disk"""
            vid = parse_video_id(video_id)
            user_id = self._authenticate(request)
            logger.info(f"uploading thumbnail for video {vid} by user {user_id}")

            video = await run_in_threadpool(usecase.get_owned_record, vid, user_id)

            form, upload = await self._read_form_file(request, "thumbnail", "Couldn't parse form file")
            try:
                media_type = parse_media_type(upload.content_type)
                return await run_in_threadpool(usecase.upload_thumbnail, video, upload.file, media_type)
            finally:
                await form.close()

        @self.app.post("/api/video_upload/{video_id}", response_model=VideoView)
        async def upload_video(video_id: str, request: Request):
            """Upload an MP4 for a video the caller owns.

            Authentication and ownership are checked before the multipart body
            is read; the blocking pipeline (ffprobe, ffmpeg, S3) runs in the
            threadpool.
            """
            user_id = self._authenticate(request)
            vid = parse_video_id(video_id)
            video = await run_in_threadpool(usecase.get_owned_record, vid, user_id)
            logger.info(f"uploading video for video {vid} by user {user_id}")

            form, upload = await self._read_form_file(request, "video", "Couldn't get uploaded file")
            try:
                media_type = parse_media_type(upload.content_type)
                usecase.check_video_media_type(media_type)
                return await run_in_threadpool(usecase.upload_video, video, upload.file, media_type)
            finally:
                await form.close()

    async def start_server(self):
        """Start FastAPI server"""
        config = uvicorn.Config(
            app=self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
            access_log=self.config.debug,
        )
        self.server = uvicorn.Server(config)
        logger.info(f"Tubely API listening on http://{self.config.host}:{self.config.port}")
        logger.info(f"API documentation: http://{self.config.host}:{self.config.port}/docs")
        await self.server.serve()

    async def stop_server(self):
        """Stop FastAPI server"""
        if self.server:
            self.server.should_exit = True
            logger.info("Tubely API server stopped")
