"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from label_scanner.api.models import (
    CompareRequest,
    CompareResponse,
    ExtractRequest,
    ScanRequest,
    ScanResponse,
)
from label_scanner.app_logging import configure_logging
from label_scanner.containers import AppContainer
from label_scanner.services.comparison import compare_product
from label_scanner.services.scan import InvalidImageError, TextRecognitionError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/scan", response_model=ScanResponse)
    async def scan(payload: ScanRequest, request: Request) -> ScanResponse:
        """Recognize a label photo and extract its nutrition fields."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.scan_service.scan(payload.image_base64)
        except InvalidImageError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except TextRecognitionError as exc:
            logger.exception("Text recognition failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Text recognition failed",
            ) from exc
        return ScanResponse.from_result(result)

    @app.post("/extract", response_model=ScanResponse)
    async def extract(payload: ExtractRequest, request: Request) -> ScanResponse:
        """Extract nutrition fields from already recognized text."""
        state_container: AppContainer = request.app.state.container
        return ScanResponse.from_result(
            state_container.scan_service.extract(payload.text)
        )

    @app.post("/compare", response_model=CompareResponse)
    async def compare(payload: CompareRequest, request: Request) -> CompareResponse:
        """Compare a product against a restriction profile."""
        state_container: AppContainer = request.app.state.container
        profile = payload.profile.to_profile(
            state_container.settings.default_strictness
        )
        result = compare_product(payload.product.to_record(), profile)
        return CompareResponse.from_result(result)

    return app
