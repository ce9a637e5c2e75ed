from pydantic import BaseModel

class UserCredentials(BaseModel):
    name: str
    password: str

class User(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
