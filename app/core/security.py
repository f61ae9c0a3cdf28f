from fastapi import Header, HTTPException, status


def get_current_user_id(
    x_user_id: str | None = Header(default=None),
) -> str:
    """
    The signed-in user's id, resolved by the auth layer in front of this service.
    Example: X-User-Id: 692b45fe751ce734f8f8f0c6
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated",
        )
    return x_user_id.strip()
