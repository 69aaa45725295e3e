# streamcoder/services/api/routers/metadata.py
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from http import HTTPStatus

from streamcoder.common.logging import get_logger
from streamcoder.common.settings import get_settings
from streamcoder.domain.ports.metadata import MetadataReaderPort
from streamcoder.services.api.deps import get_metadata_reader
from streamcoder.services.mappers.metadata import to_metadata_out
from streamcoder.services.schemas.metadata import MetadataOut, MetadataRequest
from streamcoder.services.transcode.ffmpeg_adapter import TranscodeError

logger = get_logger()
cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/metadata", tags=["metadata"])


@router.post("", response_model=MetadataOut)
def post_metadata(
    payload: MetadataRequest,
    reader: MetadataReaderPort = Depends(get_metadata_reader),
) -> MetadataOut:
    try:
        record = reader.read(Path(payload.path))
    except FileNotFoundError as e:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(e)) from e
    except TranscodeError as e:
        logger.warning("metadata read failed for %s: %s", payload.path, e.message)
        raise HTTPException(
            status_code=HTTPStatus.BAD_GATEWAY,
            detail={"message": e.message, "stderr": e.stderr, "rc": e.rc},
        ) from e
    return to_metadata_out(record)
