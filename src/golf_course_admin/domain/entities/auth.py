from __future__ import annotations

from pydantic import BaseModel

from golf_course_admin.errors import ValidationError


class LoginRequest(BaseModel):
    # system login historically accepted `name` as well as `username`
    username: str | None = None
    name: str | None = None
    password: str | None = None

    def credentials(self, *, allow_name_alias: bool = False) -> tuple[str, str]:
        username = self.username
        if not username and allow_name_alias:
            username = self.name
        if not username or not self.password:
            raise ValidationError("Username and password are required")
        if len(username) > 50 or len(self.password) > 100:
            raise ValidationError("Username or password too long")
        return username, self.password
