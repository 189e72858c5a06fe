import enum


class UserRole(str, enum.Enum):
    admin = "admin"
    user = "user"


class ThemePreference(str, enum.Enum):
    light = "light"
    dark = "dark"
    system = "system"
