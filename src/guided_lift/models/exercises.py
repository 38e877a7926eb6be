"""Exercise library definitions."""

from dataclasses import dataclass, field
from enum import Enum


class MuscleGroup(str, Enum):
    """Primary muscle group trained by an exercise."""

    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    ABS = "abs"
    FULL_BODY = "full_body"


class EquipmentType(str, Enum):
    """Equipment types for exercises."""

    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    KETTLEBELL = "kettlebell"
    CABLE = "cable"
    MACHINE = "machine"
    BODYWEIGHT = "bodyweight"
    BANDS = "bands"


@dataclass
class Exercise:
    """A movement in the exercise library."""

    name: str
    muscle_group: MuscleGroup
    equipment: EquipmentType | None = None
    aliases: list[str] = field(default_factory=list)
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "muscle_group": self.muscle_group.value,
            "equipment": self.equipment.value if self.equipment else None,
            "aliases": self.aliases,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Exercise":
        """Create from dictionary."""
        equipment = data.get("equipment")
        return cls(
            id=id,
            name=data["name"],
            muscle_group=MuscleGroup(data["muscle_group"]),
            equipment=EquipmentType(equipment) if equipment else None,
            aliases=data.get("aliases", []),
        )


# Starter library seeded by `guided-lift init`
COMMON_EXERCISES: list[Exercise] = [
    Exercise("Bench Press", MuscleGroup.CHEST, EquipmentType.BARBELL, ["BB Bench"]),
    Exercise("Incline Dumbbell Press", MuscleGroup.CHEST, EquipmentType.DUMBBELL),
    Exercise("Push Up", MuscleGroup.CHEST, EquipmentType.BODYWEIGHT),
    Exercise("Overhead Press", MuscleGroup.SHOULDERS, EquipmentType.BARBELL, ["OHP"]),
    Exercise("Lateral Raise", MuscleGroup.SHOULDERS, EquipmentType.DUMBBELL),
    Exercise("Barbell Row", MuscleGroup.BACK, EquipmentType.BARBELL, ["BB Row"]),
    Exercise("Pull Up", MuscleGroup.BACK, EquipmentType.BODYWEIGHT),
    Exercise("Lat Pulldown", MuscleGroup.BACK, EquipmentType.CABLE),
    Exercise("Squat", MuscleGroup.QUADS, EquipmentType.BARBELL, ["Back Squat"]),
    Exercise("Leg Press", MuscleGroup.QUADS, EquipmentType.MACHINE),
    Exercise("Romanian Deadlift", MuscleGroup.HAMSTRINGS, EquipmentType.BARBELL, ["RDL"]),
    Exercise("Deadlift", MuscleGroup.BACK, EquipmentType.BARBELL),
    Exercise("Hip Thrust", MuscleGroup.GLUTES, EquipmentType.BARBELL),
    Exercise("Standing Calf Raise", MuscleGroup.CALVES, EquipmentType.MACHINE),
    Exercise("Barbell Curl", MuscleGroup.BICEPS, EquipmentType.BARBELL),
    Exercise("Tricep Pushdown", MuscleGroup.TRICEPS, EquipmentType.CABLE),
    Exercise("Plank", MuscleGroup.ABS, EquipmentType.BODYWEIGHT),
    Exercise("Kettlebell Swing", MuscleGroup.FULL_BODY, EquipmentType.KETTLEBELL),
]


# Workout name -> (exercise, sets, target reps, rest seconds)
SAMPLE_WORKOUTS: dict[str, list[tuple[str, int, int, int]]] = {
    "Upper A": [
        ("Bench Press", 4, 6, 120),
        ("Barbell Row", 4, 8, 90),
        ("Overhead Press", 3, 8, 90),
        ("Lateral Raise", 3, 12, 60),
        ("Tricep Pushdown", 3, 12, 60),
    ],
    "Lower A": [
        ("Squat", 4, 5, 150),
        ("Romanian Deadlift", 3, 8, 120),
        ("Leg Press", 3, 10, 90),
        ("Standing Calf Raise", 3, 15, 60),
    ],
    "Full Body Express": [
        ("Deadlift", 3, 5, 120),
        ("Pull Up", 3, 8, 90),
        ("Push Up", 3, 15, 60),
        ("Kettlebell Swing", 3, 20, 60),
    ],
}
