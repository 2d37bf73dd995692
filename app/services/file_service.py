import os
from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional
import aiofiles
from fastapi import UploadFile
from app.config import settings
from app.core.exceptions import StorageUnavailableException, ValidationFailedException
from app.utils.path_helpers import from_public_url, to_public_url

logger = logging.getLogger(__name__)

class FileService:
    """Локальное хранилище загрузок; наружу отдает только публичный путь /uploads/..."""

    def __init__(self, max_size: int = None):
        self.base_upload_dir = Path(settings.UPLOAD_DIR)
        self.base_upload_dir.mkdir(parents=True, exist_ok=True)
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE
    
    @staticmethod
    def is_provided(upload_file: Optional[UploadFile]) -> bool:
        """Браузеры присылают пустое поле файла, если ничего не выбрано"""
        return upload_file is not None and bool(upload_file.filename)

    @staticmethod
    def has_mime_prefix(upload_file: UploadFile, prefix: str) -> bool:
        return (upload_file.content_type or "").startswith(prefix)

    async def save_upload_file(self, upload_file: UploadFile, subdir: str = "") -> Optional[str]:
        """Сохраняет загруженный файл и возвращает его публичный путь"""
        try:
            # Создаем поддиректорию
            upload_dir = self.base_upload_dir / subdir
            upload_dir.mkdir(parents=True, exist_ok=True)
            
            # Генерируем уникальное имя файла
            file_ext = Path(upload_file.filename).suffix if upload_file.filename else ""
            unique_filename = f"{os.urandom(8).hex()}{file_ext}"
            file_path = upload_dir / unique_filename
            
            # Сохраняем файл
            async with aiofiles.open(file_path, 'wb') as out_file:
                content = await upload_file.read()
                await out_file.write(content)
            
            return to_public_url(file_path)
            
        except OSError as e:
            logger.error(f"Ошибка при сохранении файла {upload_file.filename}: {e}")
            return None

    def is_too_large(self, upload_file: UploadFile) -> bool:
        return upload_file.size is not None and upload_file.size > self.max_size

    async def save_media(self, upload_file: UploadFile, field: str, mime_prefix: str, subdir: str) -> str:
        """Проверяет тип и размер загрузки, сохраняет ее и возвращает публичный путь"""
        errors = []
        if not self.has_mime_prefix(upload_file, mime_prefix):
            errors.append({
                "field": field,
                "constraint": "content_type",
                "message": f"File must be of type {mime_prefix}*, got {upload_file.content_type or 'unknown'}",
            })
        if self.is_too_large(upload_file):
            errors.append({
                "field": field,
                "constraint": "max_size",
                "message": f"File is larger than {self.max_size} bytes",
            })
        if errors:
            raise ValidationFailedException(details=errors)

        file_url = await self.save_upload_file(upload_file, subdir=subdir)
        if not file_url:
            raise StorageUnavailableException(detail="Failed to save file")
        return file_url

    @contextmanager
    def cleanup_on_error(self, file_url: Optional[str]):
        """Удаляет только что сохраненный файл, если запись в базу не удалась"""
        try:
            yield
        except Exception:
            if file_url:
                self.delete_file(file_url)
            raise

    def delete_file(self, file_url: str) -> bool:
        """Удаляет файл по публичному пути"""
        path = from_public_url(file_url)
        if path is None:
            return False
        try:
            if path.exists():
                path.unlink()
                return True
            return False
        except OSError as e:
            logger.warning(f"Не удалось удалить старый файл {path}: {e}")
            return False
