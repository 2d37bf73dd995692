from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.schemas.profile import ProfileResponse
from app.crud import profile as crud_profile
from app.core.exceptions import ConflictException, ProfileNotFoundException
from app.core.policy import Principal
from app.api.dependencies import require_login
from app.services.file_service import FileService

router = APIRouter()
file_service = FileService()

@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    first_name: str = Form(..., min_length=1),
    last_name: str = Form(..., min_length=1),
    phone: str = Form(..., min_length=1),
    address: str = Form(..., min_length=1),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_login)
):
    """Создать профиль текущего пользователя"""
    if crud_profile.get_profile_by_user(db, user_id=principal.user_id):
        raise ConflictException(detail="Profile already exists", reason="profile_exists")
    
    data = {
        "first_name": first_name,
        "last_name": last_name,
        "phone": phone,
        "address": address,
    }
    if file_service.is_provided(image):
        data["avatar"] = await file_service.save_media(image, field="image", mime_prefix="image/", subdir="profiles")
    
    with file_service.cleanup_on_error(data.get("avatar")):
        return crud_profile.create_profile(db, user_id=principal.user_id, data=data)

@router.get("", response_model=ProfileResponse)
async def read_profile(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_login)
):
    profile = crud_profile.get_profile_by_user(db, user_id=principal.user_id)
    if not profile:
        raise ProfileNotFoundException()
    return profile

@router.put("", response_model=ProfileResponse)
async def update_profile(
    first_name: Optional[str] = Form(None, min_length=1),
    last_name: Optional[str] = Form(None, min_length=1),
    phone: Optional[str] = Form(None, min_length=1),
    address: Optional[str] = Form(None, min_length=1),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_login)
):
    """Обновить профиль; новая картинка заменяет старую"""
    profile = crud_profile.get_profile_by_user(db, user_id=principal.user_id)
    if not profile:
        raise ProfileNotFoundException()
    
    data = {
        field: value
        for field, value in (
            ("first_name", first_name),
            ("last_name", last_name),
            ("phone", phone),
            ("address", address),
        )
        if value is not None
    }
    old_avatar = profile.avatar
    if file_service.is_provided(image):
        data["avatar"] = await file_service.save_media(image, field="image", mime_prefix="image/", subdir="profiles")
    
    with file_service.cleanup_on_error(data.get("avatar")):
        profile = crud_profile.update_profile(db, profile, data)
    
    # Старый файл удаляем только после успешного сохранения
    if "avatar" in data and old_avatar:
        file_service.delete_file(old_avatar)
    
    return profile

@router.delete("")
async def delete_profile(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_login)
):
    profile = crud_profile.get_profile_by_user(db, user_id=principal.user_id)
    if not profile:
        raise ProfileNotFoundException()
    
    avatar = profile.avatar
    crud_profile.delete_profile(db, profile)
    if avatar:
        file_service.delete_file(avatar)
    return {"message": "Profile deleted successfully"}
