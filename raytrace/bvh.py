"""
Bounding Volume Hierarchy (BVH) for accelerating ray-object intersection.

BVH is a binary tree where each node caches the AABB of everything below
it. Leaves reference one or two primitives directly; a single primitive
is stored as both children.

The split axis is chosen by sorting the objects on each axis by the
minimum corner of their boxes and keeping the order whose two halves
have the most similar total box volume.
"""

from __future__ import annotations
import logging
from typing import Optional, List, Sequence

from .ray import Ray
from .shapes import Hittable, HitRecord, AABB, HittableList

logger = logging.getLogger(__name__)


class BVHBuildError(ValueError):
    """Raised when a BVH cannot be built from the given objects."""


def _box_of(obj: Hittable, time0: float, time1: float) -> AABB:
    box = obj.bounding_box(time0, time1)
    if box is None:
        raise BVHBuildError(f"No bounding box for {obj!r} in BVH construction")
    return box


def _split_score(boxes: Sequence[AABB], mid: int) -> float:
    """Absolute difference between the summed volumes of both halves."""
    left = sum(box.volume() for box in boxes[:mid])
    right = sum(box.volume() for box in boxes[mid:])
    return abs(left - right)


class BVHNode(Hittable):
    """A node in the Bounding Volume Hierarchy tree.

    Built once and never mutated afterwards.
    """

    def __init__(self, objects: List[Hittable], time0: float, time1: float):
        """Build a BVH subtree from a list of objects.

        Args:
            objects: Non-empty list of hittable objects
            time0: Start of the time range the boxes must cover
            time1: End of the time range the boxes must cover

        Raises:
            BVHBuildError: If the list is empty or an object is unbounded
        """
        object_span = len(objects)

        if object_span == 0:
            raise BVHBuildError("Cannot build a BVH node from an empty object list")

        if object_span == 1:
            self.left: Hittable = objects[0]
            self.right: Hittable = objects[0]

        elif object_span == 2:
            self.left = objects[0]
            self.right = objects[1]

        else:
            mid = object_span // 2
            best_order: Optional[List[Hittable]] = None
            best_score = float('inf')

            for axis in range(3):
                entries = sorted(
                    ((obj, _box_of(obj, time0, time1)) for obj in objects),
                    key=lambda entry: entry[1].minimum[axis]
                )
                score = _split_score([box for _, box in entries], mid)
                if best_order is None or score < best_score:
                    best_score = score
                    best_order = [obj for obj, _ in entries]

            self.left = BVHNode(best_order[:mid], time0, time1)
            self.right = BVHNode(best_order[mid:], time0, time1)

        self.bbox = AABB.surrounding_box(
            _box_of(self.left, time0, time1),
            _box_of(self.right, time0, time1)
        )

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray intersection with BVH node.

        Both children are searched over the same window and the nearer
        hit wins.
        """
        if not self.bbox.hit(ray, t_min, t_max):
            return None

        hit_left = self.left.hit(ray, t_min, t_max)
        if self.right is self.left:
            return hit_left

        hit_right = self.right.hit(ray, t_min, t_max)

        if hit_left is None:
            return hit_right
        if hit_right is None:
            return hit_left
        return hit_left if hit_left.t <= hit_right.t else hit_right

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        """Return the box cached at construction time."""
        return self.bbox

    def depth(self) -> int:
        """Return the number of node levels below and including this one."""
        child_depths = [
            child.depth() for child in (self.left, self.right)
            if isinstance(child, BVHNode)
        ]
        return 1 + max(child_depths, default=0)


class BVH(Hittable):
    """Bounding Volume Hierarchy acceleration structure.

    Provides O(log n) ray intersection instead of O(n) for n objects.
    """

    def __init__(self, objects: List[Hittable], time0: float, time1: float):
        """Build a BVH from a list of objects.

        Args:
            objects: Non-empty list of hittable objects to accelerate
            time0: Start of the shutter interval the boxes must cover
            time1: End of the shutter interval the boxes must cover

        Raises:
            BVHBuildError: If objects is empty or contains an unbounded object
        """
        self.objects = list(objects)  # Make a copy

        if not self.objects:
            raise BVHBuildError("A scene must contain at least one primitive")

        self.time0 = time0
        self.time1 = time1
        self.root = BVHNode(self.objects, time0, time1)

        logger.debug(
            f"Built BVH over {len(self.objects)} objects, depth {self.root.depth()}, "
            f"bounds {self.root.bbox}"
        )

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray intersection using the BVH."""
        return self.root.hit(ray, t_min, t_max)

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        """Return the bounding box for the entire BVH."""
        return self.root.bounding_box()

    def __len__(self) -> int:
        """Return the number of objects in the BVH."""
        return len(self.objects)


def build_bvh(scene: HittableList, time0: float, time1: float) -> BVH:
    """Convenience function to build a BVH from a HittableList.

    Args:
        scene: The scene as a HittableList
        time0: Start of the shutter interval
        time1: End of the shutter interval

    Returns:
        A BVH acceleration structure
    """
    return BVH(list(scene.objects), time0, time1)
