import re
from typing import Optional

USERNAME_PATTERN = re.compile(r'[a-zA-Z0-9_]{3,20}')
PASSWORD_MIN_LENGTH = 8

# (шаблон, чего не хватает паролю)
PASSWORD_RULES = (
    (re.compile(r'\d'), 'a digit'),
    (re.compile(r'[A-Z]'), 'an upper case letter'),
    (re.compile(r'[a-z]'), 'a lower case letter'),
)

def username_error(username: str) -> Optional[str]:
    """None, если имя подходит, иначе текст ошибки"""
    if USERNAME_PATTERN.fullmatch(username):
        return None
    return 'Username must be 3-20 characters: letters, digits or underscore'

def password_error(password: str) -> Optional[str]:
    """Перечисляет все нарушенные правила сразу"""
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(f'at least {PASSWORD_MIN_LENGTH} characters')
    problems.extend(name for pattern, name in PASSWORD_RULES if not pattern.search(password))
    if not problems:
        return None
    return 'Password must contain ' + ', '.join(problems)
