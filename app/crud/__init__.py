from .user import (
    get_user,
    get_users,
    get_user_by_email,
    get_user_by_username,
    authenticate_user,
    create_user,
    soft_delete_user
)

from .profile import (
    get_profile_by_user,
    create_profile,
    update_profile,
    delete_profile
)

from .course import (
    get_course,
    get_courses,
    create_course,
    update_course,
    delete_course
)

from .lesson import (
    get_course_lesson,
    get_lessons_by_course,
    create_lesson,
    update_lesson,
    delete_lesson
)
