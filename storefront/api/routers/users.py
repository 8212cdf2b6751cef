# storefront/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.store import MemoryStore, get_store
from storefront.domain.schemas import ProfileEnvelope, User, UserCreate

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/register", response_model=User, status_code=201)
def register_user(payload: UserCreate, store: MemoryStore = Depends(get_store)):
    with store.lock:
        # juz jest - zwracamy istniejacego
        existing = store.users.get(payload.email)
        if existing:
            return existing
        store.users[payload.email] = payload.model_dump()
        return store.users[payload.email]


@router.get("/{email}", response_model=User)
def get_user(email: str, store: MemoryStore = Depends(get_store)):
    user = store.users.get(email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{email}/profile", response_model=ProfileEnvelope)
def get_profile(email: str, store: MemoryStore = Depends(get_store)):
    if email not in store.users:
        raise HTTPException(status_code=404, detail="User not found")
    # nowy user - pusty profil
    return {"profile": store.profiles.get(email, {})}


@router.put("/{email}/profile", response_model=ProfileEnvelope)
def update_profile(email: str, payload: ProfileEnvelope, store: MemoryStore = Depends(get_store)):
    if email not in store.users:
        raise HTTPException(status_code=404, detail="User not found")
    with store.lock:
        store.profiles[email] = payload.profile.model_dump(by_alias=True)
    return {"profile": store.profiles[email]}
