"""Session Entity Models (the shadow of the host scene)."""
from __future__ import annotations

from typing import Any, ClassVar, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Vec2 = List[float]
Vec3 = List[float]

AnimationChannelKind = Literal["rot", "pos", "scale"]
AnimationTriggerKind = Literal["sound", "particle", "timeline"]
Interpolation = Literal["linear", "step", "catmullrom"]
AnimationsStatus = Literal["available", "unavailable"]


class _Tracked(BaseModel):
    """Base for tracked records. Names are the identity inside a collection."""
    model_config = ConfigDict(populate_by_name=True)

    # Fields an explicit None in an update must not clear.
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"name"})

    name: str


# --- Model Structure ---

class TrackedBone(_Tracked):
    """A bone (outliner group). `parent` is a weak reference by name."""
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"name", "pivot"})

    parent: Optional[str] = None
    pivot: Vec3 = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    rotation: Optional[Vec3] = None
    scale: Optional[Vec3] = None
    visibility: Optional[bool] = None


class TrackedCube(_Tracked):
    """A cube owned by a bone. `bone` is a weak reference by name."""
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"name", "from_", "to", "bone"})

    from_: Vec3 = Field(default_factory=lambda: [0.0, 0.0, 0.0], alias="from")
    to: Vec3 = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    bone: str = "root"
    origin: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    uv: Optional[Vec2] = None  # uv offset [u, v]
    inflate: Optional[float] = None
    mirror: Optional[bool] = None
    visibility: Optional[bool] = None
    box_uv: Optional[bool] = None

    @property
    def size(self) -> Vec3:
        return [abs(b - a) for a, b in zip(self.from_, self.to)]


class TrackedTexture(_Tracked):
    """A texture and the cubes it is assigned to."""
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"name", "width", "height", "assigned_cubes"})

    width: int = 0
    height: int = 0
    path: Optional[str] = None
    assigned_cubes: List[str] = Field(default_factory=list)

    @property
    def assigned(self) -> bool:
        return len(self.assigned_cubes) > 0


# --- Animation Data ---

class TrackedAnimationKey(BaseModel):
    time: float
    value: Vec3
    interp: Optional[Interpolation] = None


class TrackedAnimationChannel(BaseModel):
    """Keyframe track for one bone and one transform channel."""
    bone: str
    channel: AnimationChannelKind
    keys: List[TrackedAnimationKey] = Field(default_factory=list)

    @property
    def identity(self) -> tuple:
        return (self.bone, self.channel)


class TrackedTriggerKey(BaseModel):
    time: float
    value: Any = None


class TrackedAnimationTrigger(BaseModel):
    """Time-indexed side-effect markers (sounds, particles, timeline scripts)."""
    type: AnimationTriggerKind
    keys: List[TrackedTriggerKey] = Field(default_factory=list)

    @property
    def identity(self) -> str:
        return self.type


class TrackedAnimation(_Tracked):
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"name", "length", "loop"})

    length: float = 0.0
    loop: bool = False
    fps: Optional[float] = None
    channels: Optional[List[TrackedAnimationChannel]] = None
    triggers: Optional[List[TrackedAnimationTrigger]] = None


# --- Partial Updates ---
# Only fields present in `model_fields_set` are applied.

class BoneUpdate(BaseModel):
    new_name: Optional[str] = None
    parent: Optional[str] = None
    pivot: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    scale: Optional[Vec3] = None
    visibility: Optional[bool] = None


class CubeUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_name: Optional[str] = None
    from_: Optional[Vec3] = Field(default=None, alias="from")
    to: Optional[Vec3] = None
    bone: Optional[str] = None
    origin: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    uv: Optional[Vec2] = None
    inflate: Optional[float] = None
    mirror: Optional[bool] = None
    visibility: Optional[bool] = None
    box_uv: Optional[bool] = None


class TextureUpdate(BaseModel):
    new_name: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    path: Optional[str] = None
    assigned_cubes: Optional[List[str]] = None


class AnimationUpdate(BaseModel):
    new_name: Optional[str] = None
    length: Optional[float] = None
    loop: Optional[bool] = None
    fps: Optional[float] = None
    channels: Optional[List[TrackedAnimationChannel]] = None
    triggers: Optional[List[TrackedAnimationTrigger]] = None


# --- Session ---

class TextureResolution(BaseModel):
    width: int
    height: int


class SessionState(BaseModel):
    """Full shadow session. Lives for one process; never persisted."""
    id: Optional[str] = None
    format: Optional[str] = None
    format_id: Optional[str] = None
    name: Optional[str] = None
    dirty: Optional[bool] = None
    texture_resolution: Optional[TextureResolution] = None
    bones: List[TrackedBone] = Field(default_factory=list)
    cubes: List[TrackedCube] = Field(default_factory=list)
    textures: List[TrackedTexture] = Field(default_factory=list)
    animations: List[TrackedAnimation] = Field(default_factory=list)
    animations_status: AnimationsStatus = "available"
