import logging

import py_eureka_client.eureka_client as eureka_client

from lms_admin.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


async def register_with_eureka():
    """Register this service with the Eureka server"""
    if not settings.eureka_enabled:
        logger.info("Eureka registration disabled")
        return
    try:
        await eureka_client.init_async(
            eureka_server=settings.eureka_server_url,
            app_name=settings.app_name,
            instance_host=settings.instance_host,
            instance_port=settings.instance_port,
            health_check_url=f"http://{settings.instance_host}:{settings.instance_port}/health",
            status_page_url=f"http://{settings.instance_host}:{settings.instance_port}/docs",
        )
        logger.info(f"Registered with Eureka: {settings.app_name}")
    except Exception as e:
        logger.error(f"Failed to register with Eureka: {str(e)}")


async def deregister_from_eureka():
    """Remove this service from the Eureka registry"""
    if not settings.eureka_enabled:
        return
    try:
        await eureka_client.stop_async()
        logger.info(f"Deregistered from Eureka: {settings.app_name}")
    except Exception as e:
        logger.error(f"Failed to deregister from Eureka: {str(e)}")
