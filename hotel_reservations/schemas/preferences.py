from pydantic import BaseModel


class PreferencePayload(BaseModel):
    room_type_id: int


class PreferencesOut(BaseModel):
    room_type_ids: list[int]


class FavoriteOut(BaseModel):
    room_type_id: int
    is_favorite: bool
