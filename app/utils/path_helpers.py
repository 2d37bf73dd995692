from pathlib import Path
from typing import Optional
from app.config import settings

PUBLIC_PREFIX = "/uploads/"

def _upload_root() -> Path:
    return Path(settings.UPLOAD_DIR).resolve()

def to_public_url(file_path: Path) -> str:
    """Путь внутри UPLOAD_DIR -> /uploads/<подкаталог>/<файл>"""
    rel_path = Path(file_path).resolve().relative_to(_upload_root())
    return f"{PUBLIC_PREFIX}{rel_path.as_posix()}"

def from_public_url(file_url: str) -> Optional[Path]:
    """Обратное преобразование; чужие и выходящие за UPLOAD_DIR пути дают None"""
    if not file_url or not file_url.startswith(PUBLIC_PREFIX):
        return None
    root = _upload_root()
    path = (root / file_url[len(PUBLIC_PREFIX):]).resolve()
    # Защита от ../ в сохраненном пути
    if root not in path.parents:
        return None
    return path
