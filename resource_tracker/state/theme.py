"""Theme preference - persisted locally in the preferences table."""
from typing import Callable, Optional, Union

from sqlalchemy.orm import Session

from resource_tracker.database import SessionLocal
from resource_tracker.errors import ValidationError
from resource_tracker.logging_config import get_logger
from resource_tracker.models.settings import Preference, PREFERENCE_KEYS, Theme

logger = get_logger(__name__)

THEME_KEY = "theme"


def get_preference(db: Session, key: str) -> Optional[Preference]:
    """Get a preference by key."""
    return db.query(Preference).filter(Preference.key == key).first()


def get_preference_value(db: Session, key: str) -> str:
    """Get a preference value, returning default if not set."""
    preference = get_preference(db, key)
    if preference and preference.value is not None:
        return preference.value
    return PREFERENCE_KEYS.get(key, {}).get("default", "")


def set_preference(db: Session, key: str, value: str) -> Preference:
    """Set a preference value."""
    preference = get_preference(db, key)
    if preference:
        preference.value = value
    else:
        preference = Preference(
            key=key,
            value=value,
            description=PREFERENCE_KEYS.get(key, {}).get("description", "")
        )
        db.add(preference)
    db.commit()
    db.refresh(preference)
    return preference


class ThemeStore:
    """Process-wide theme preference, loaded on start and saved on every change."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory
        self.theme = Theme(PREFERENCE_KEYS[THEME_KEY]["default"])

    def load(self) -> Theme:
        db = self._session_factory()
        try:
            value = get_preference_value(db, THEME_KEY)
        finally:
            db.close()

        try:
            self.theme = Theme(value)
        except ValueError:
            logger.warning("theme_preference_invalid", value=value)
            self.theme = Theme(PREFERENCE_KEYS[THEME_KEY]["default"])
        return self.theme

    def set_theme(self, theme: Union[Theme, str]) -> Theme:
        try:
            theme = Theme(theme)
        except ValueError:
            raise ValidationError(f"Theme must be one of: {', '.join(t.value for t in Theme)}")

        db = self._session_factory()
        try:
            set_preference(db, THEME_KEY, theme.value)
        finally:
            db.close()
        self.theme = theme
        return theme

    def toggle(self, prefers_dark: bool = False) -> Theme:
        """Cycle light -> dark -> system; from system, switch away from what the client shows."""
        if self.theme == Theme.LIGHT:
            new_theme = Theme.DARK
        elif self.theme == Theme.DARK:
            new_theme = Theme.SYSTEM
        else:
            new_theme = Theme.LIGHT if prefers_dark else Theme.DARK
        return self.set_theme(new_theme)
