WALL = "wall"
OBSTACLE = "obstacle"
SELF = "self"


def detect_collision(head, body, obstacles, boundary, neck_window=0):
    """Return the collision reason for a post-move head, or None.

    body is the post-move body with the head at index 0. Checks run in a fixed
    order: wall, obstacle, then self. The ``neck_window`` segments right behind
    the head are skipped by the self check.
    """
    if not boundary.wraps and not boundary.contains(head):
        return WALL
    if head in obstacles:
        return OBSTACLE
    if head in body[1 + neck_window:]:
        return SELF
    return None
