import enum


class RoomType(str, enum.Enum):
    SINGLE = "Single"
    DOUBLE = "Double"
    DELUXE = "Deluxe"

    @classmethod
    def parse(cls, value):
        """Accepts a RoomType, its name/value in any case, or its 1-based ordinal."""
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown room type '{value}'.")
        if isinstance(value, int):
            members = list(cls)
            if 1 <= value <= len(members):
                return members[value - 1]
            raise ValueError(f"Unknown room type '{value}'.")
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls.parse(int(text))
            for member in cls:
                if text.lower() in (member.value.lower(), member.name.lower()):
                    return member
        raise ValueError(f"Unknown room type '{value}'.")
