"""
첨부파일 바이트 저장소
업로드된 파일을 충돌 없는 저장 이름으로 기록하고, 저장 이름으로만 다시 읽는다.
원본 파일명은 경로 구성에 절대 사용하지 않는다.
"""

import inspect
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Optional
import aiofiles
import aiofiles.os
import logging

from app.core.config import settings
from app.core.exceptions import InvalidArgument, NotFound, StorageWriteError

logger = logging.getLogger(__name__)

STORAGE_NAME_PATTERN = re.compile(r"^[0-9a-f]{32}$")
PARTIAL_SUFFIX = ".part"


@dataclass(frozen=True)
class StoredFile:
    """디스크에 기록된 파일 정보"""
    storage_name: str
    size: int


class FileStorage:
    """파일 저장소"""

    def __init__(
        self,
        upload_dir: str = "./uploads",
        max_file_size: int = 50 * 1024 * 1024,
        chunk_size: int = 64 * 1024,
    ):
        self.upload_dir = Path(upload_dir)
        self.max_file_size = max_file_size
        self.chunk_size = chunk_size

    async def ensure_upload_dir(self):
        """업로드 디렉토리 확인 및 생성"""
        await aiofiles.os.makedirs(self.upload_dir, exist_ok=True)

    @staticmethod
    def generate_storage_name() -> str:
        """고유한 저장 이름 생성 (원본 파일명과 무관)"""
        return uuid.uuid4().hex

    def path_for(self, storage_name: str) -> Path:
        """저장 이름으로 파일 경로 구성"""
        if not STORAGE_NAME_PATTERN.match(storage_name or ""):
            raise NotFound("첨부파일을 찾을 수 없습니다.")
        return self.upload_dir / storage_name

    async def save(self, stream: Optional[Any]) -> Optional[StoredFile]:
        """스트림을 끝까지 기록. 빈 파일이면 아무것도 만들지 않고 None

        stream은 read(size)를 가진 파일 객체. UploadFile처럼 read가 코루틴이면 await 한다.
        """
        if stream is None:
            return None

        first_chunk = await self._read_chunk(stream)
        if not first_chunk:
            return None

        storage_name = self.generate_storage_name()
        target = self.upload_dir / storage_name
        partial = self.upload_dir / f"{storage_name}{PARTIAL_SUFFIX}"
        size = 0

        try:
            await self.ensure_upload_dir()
            # 'xb': 같은 이름이 이미 있으면 덮어쓰지 않고 실패
            async with aiofiles.open(partial, "xb") as out:
                chunk = first_chunk
                while chunk:
                    size += len(chunk)
                    if size > self.max_file_size:
                        raise InvalidArgument(
                            f"파일 크기가 너무 큽니다. 최대 {self.max_file_size // (1024 * 1024)}MB"
                        )
                    await out.write(chunk)
                    chunk = await self._read_chunk(stream)
            await aiofiles.os.replace(partial, target)

        except OSError as e:
            await self._discard(partial)
            logger.error(f"Failed to write attachment {storage_name}: {e}")
            raise StorageWriteError(f"파일 저장 실패: {str(e)}") from e
        except Exception:
            await self._discard(partial)
            raise

        logger.info(f"Stored attachment {storage_name} ({size} bytes)")
        return StoredFile(storage_name=storage_name, size=size)

    async def _read_chunk(self, stream) -> bytes:
        chunk = stream.read(self.chunk_size)
        if inspect.isawaitable(chunk):
            chunk = await chunk
        return chunk

    async def exists(self, storage_name: str) -> bool:
        return await aiofiles.os.path.isfile(self.path_for(storage_name))

    async def iter_bytes(self, storage_name: str) -> AsyncIterator[bytes]:
        """저장된 파일을 청크 단위로 읽기"""
        async with aiofiles.open(self.path_for(storage_name), "rb") as f:
            while True:
                chunk = await f.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk

    async def delete(self, storage_name: str) -> bool:
        """파일 삭제"""
        return await self._discard(self.path_for(storage_name))

    async def _discard(self, path: Path) -> bool:
        try:
            await aiofiles.os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete file {path}: {e}")
            return False


# 전역 파일 저장소 인스턴스
file_storage = FileStorage(
    upload_dir=settings.UPLOAD_DIR,
    max_file_size=settings.MAX_FILE_SIZE,
    chunk_size=settings.UPLOAD_CHUNK_SIZE,
)
