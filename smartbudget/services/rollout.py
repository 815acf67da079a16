def rollout_hash(value: str) -> int:
    """Stable 32-bit string hash (``h * 31 + c``) used to bucket users."""
    h = 0
    for ch in value:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def is_enabled_for(feature, user_id) -> bool:
    user_id = str(user_id)
    if user_id in (feature.exclude_users or []):
        return False
    if feature.target_users:
        return user_id in feature.target_users
    if feature.rollout_percentage < 100:
        return rollout_hash(user_id + feature.key) % 100 < feature.rollout_percentage
    return True


def evaluate_features(features, user_id):
    return {feature.key: is_enabled_for(feature, user_id) for feature in features}
