import asyncio
import sys
import logging
from dotenv import load_dotenv

from tubely.api.fastapi_server import TubelyAPIServer
from tubely.config import AppConfig
from tubely.di.dependencies import DependencyContainer

logger = logging.getLogger(__name__)


async def main(config: AppConfig):
    container = DependencyContainer(config)
    server = TubelyAPIServer(config, container.get_video_usecase())
    try:
        await server.start_server()
    finally:
        await server.stop_server()
        container.close()


if __name__ == "__main__":
    load_dotenv()
    config = AppConfig.from_env()

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if config.validate():
        logger.error("Configuration validation failed")
        sys.exit(1)

    try:
        logger.info("===== Tubely API Starting =====")
        logger.info(f"Platform: {config.platform}")
        logger.info(f"Assets root: {config.storage.assets_root}")
        logger.info(f"S3 bucket: {config.storage.bucket} ({config.storage.region})")
        logger.info("===============================")

        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.info("Application terminated by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)
