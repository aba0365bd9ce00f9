"""
Constants and enumerations for the engine.

Defines global constants, and enumerations for abilities, skills, damage
types, conditions, creature sizes and movement modes used throughout the
engine.
"""

from enum import Enum
from typing import Any

# Length (in feet) of one side of a grid square.
SQUARE_LENGTH = 5

# Actions a combatant may take on a single turn.
MAX_ACTIONS_PER_TURN = 1

# Valid (inclusive) range of an ability score.
ABILITY_SCORE_RANGE = (1, 30)

# Sanity limits for dice terms read from text.
MAX_DICE_PER_TERM = 100
MAX_DIE_SIDES = 1000

# Environment variable that, when set to an integer, seeds the dice.
SEED_ENV_VAR = "SKIRMISH_SEED"


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", " ").capitalize()


class Ability(NiceEnum):
    """Defines the six abilities, in their canonical order."""

    STRENGTH = "STRENGTH"
    DEXTERITY = "DEXTERITY"
    CONSTITUTION = "CONSTITUTION"
    INTELLIGENCE = "INTELLIGENCE"
    WISDOM = "WISDOM"
    CHARISMA = "CHARISMA"

    @property
    def short_name(self) -> str:
        """Returns the 3-letter abbreviation for the ability."""
        return self.name[:3]

    @property
    def index(self) -> int:
        return list(Ability).index(self)

    @classmethod
    def from_key(cls, key: str) -> "Ability":
        """
        Resolves an ability from its name or its 3-letter alias.

        Args:
            key (str):
                The key, case insensitive (e.g. "dex", "Dexterity").

        Returns:
            Ability:
                The matching ability.

        Raises:
            KeyError:
                If the key names no ability.

        """
        upper = key.strip().upper()
        for ability in cls:
            if upper in (ability.name, ability.short_name):
                return ability
        raise KeyError(key)


class Skill(NiceEnum):
    """Defines the eighteen skills, each tied to a base ability."""

    ATHLETICS = "ATHLETICS"
    ACROBATICS = "ACROBATICS"
    SLEIGHT_OF_HAND = "SLEIGHT_OF_HAND"
    STEALTH = "STEALTH"
    ARCANA = "ARCANA"
    HISTORY = "HISTORY"
    INVESTIGATION = "INVESTIGATION"
    NATURE = "NATURE"
    RELIGION = "RELIGION"
    ANIMAL_HANDLING = "ANIMAL_HANDLING"
    INSIGHT = "INSIGHT"
    MEDICINE = "MEDICINE"
    PERCEPTION = "PERCEPTION"
    SURVIVAL = "SURVIVAL"
    DECEPTION = "DECEPTION"
    INTIMIDATION = "INTIMIDATION"
    PERFORMANCE = "PERFORMANCE"
    PERSUASION = "PERSUASION"

    @property
    def base(self) -> Ability:
        """Returns the ability this skill is derived from."""
        return _SKILL_BASES[self]


_SKILL_BASES: dict[Skill, Ability] = {
    Skill.ATHLETICS: Ability.STRENGTH,
    Skill.ACROBATICS: Ability.DEXTERITY,
    Skill.SLEIGHT_OF_HAND: Ability.DEXTERITY,
    Skill.STEALTH: Ability.DEXTERITY,
    Skill.ARCANA: Ability.INTELLIGENCE,
    Skill.HISTORY: Ability.INTELLIGENCE,
    Skill.INVESTIGATION: Ability.INTELLIGENCE,
    Skill.NATURE: Ability.INTELLIGENCE,
    Skill.RELIGION: Ability.INTELLIGENCE,
    Skill.ANIMAL_HANDLING: Ability.WISDOM,
    Skill.INSIGHT: Ability.WISDOM,
    Skill.MEDICINE: Ability.WISDOM,
    Skill.PERCEPTION: Ability.WISDOM,
    Skill.SURVIVAL: Ability.WISDOM,
    Skill.DECEPTION: Ability.CHARISMA,
    Skill.INTIMIDATION: Ability.CHARISMA,
    Skill.PERFORMANCE: Ability.CHARISMA,
    Skill.PERSUASION: Ability.CHARISMA,
}


class DamageType(NiceEnum):
    """Defines various types of damage that can be inflicted."""

    ACID = "ACID"
    BLUDGEONING = "BLUDGEONING"
    COLD = "COLD"
    FIRE = "FIRE"
    FORCE = "FORCE"
    LIGHTNING = "LIGHTNING"
    NECROTIC = "NECROTIC"
    PIERCING = "PIERCING"
    POISON = "POISON"
    PSYCHIC = "PSYCHIC"
    RADIANT = "RADIANT"
    SLASHING = "SLASHING"
    THUNDER = "THUNDER"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this damage type."""
        return {
            DamageType.PIERCING: "🗡️",
            DamageType.SLASHING: "🪓",
            DamageType.BLUDGEONING: "🔨",
            DamageType.FIRE: "🔥",
            DamageType.COLD: "❄️",
            DamageType.LIGHTNING: "⚡",
            DamageType.THUNDER: "🌩️",
            DamageType.POISON: "☠️",
            DamageType.NECROTIC: "🖤",
            DamageType.RADIANT: "✨",
            DamageType.PSYCHIC: "💫",
            DamageType.FORCE: "🌀",
            DamageType.ACID: "🧪",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this damage type."""
        return {
            DamageType.PIERCING: "bold magenta",
            DamageType.SLASHING: "bold yellow",
            DamageType.BLUDGEONING: "bold red",
            DamageType.FIRE: "bold red",
            DamageType.COLD: "bold cyan",
            DamageType.LIGHTNING: "bold blue",
            DamageType.THUNDER: "bold purple",
            DamageType.POISON: "bold green",
            DamageType.NECROTIC: "dim white",
            DamageType.RADIANT: "bold white",
            DamageType.PSYCHIC: "magenta",
            DamageType.FORCE: "cyan",
            DamageType.ACID: "green",
        }.get(self, "dim white")

    @property
    def doc(self) -> str:
        """Returns a short description of where this damage comes from."""
        return _DAMAGE_DOCS[self]

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies damage type color formatting to a message."""
        return f"[{self.color}]{message}[/]"


_DAMAGE_DOCS: dict[DamageType, str] = {
    DamageType.ACID: "Corrosive sprays and dissolving enzymes deal acid damage.",
    DamageType.BLUDGEONING: "Blunt force attacks, falling and constriction deal bludgeoning damage.",
    DamageType.COLD: "Infernal chill and frigid breath deal cold damage.",
    DamageType.FIRE: "Flames, whether breathed or conjured, deal fire damage.",
    DamageType.FORCE: "Pure magical energy focused into a damaging form deals force damage.",
    DamageType.LIGHTNING: "Lightning bolts and crackling breath deal lightning damage.",
    DamageType.NECROTIC: "Energy that withers matter and the soul deals necrotic damage.",
    DamageType.PIERCING: "Puncturing and impaling attacks, such as spears and bites, deal piercing damage.",
    DamageType.POISON: "Venomous stings and toxic gas deal poison damage.",
    DamageType.PSYCHIC: "Mental assaults such as psionic blasts deal psychic damage.",
    DamageType.RADIANT: "Searing holy light deals radiant damage.",
    DamageType.SLASHING: "Swords, axes and claws deal slashing damage.",
    DamageType.THUNDER: "Concussive bursts of sound deal thunder damage.",
}


class Condition(NiceEnum):
    """Defines the conditions a creature can suffer from, in index order."""

    BLINDED = "BLINDED"
    CHARMED = "CHARMED"
    DEAFENED = "DEAFENED"
    EXHAUSTION = "EXHAUSTION"
    FRIGHTENED = "FRIGHTENED"
    GRAPPLED = "GRAPPLED"
    INCAPACITATED = "INCAPACITATED"
    INVISIBLE = "INVISIBLE"
    PARALYZED = "PARALYZED"
    PETRIFIED = "PETRIFIED"
    POISONED = "POISONED"
    PRONE = "PRONE"
    RESTRAINED = "RESTRAINED"
    STUNNED = "STUNNED"
    UNCONSCIOUS = "UNCONSCIOUS"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this condition."""
        return {
            Condition.BLINDED: "🙈",
            Condition.CHARMED: "😍",
            Condition.DEAFENED: "🙉",
            Condition.FRIGHTENED: "😱",
            Condition.PARALYZED: "😵‍💫",
            Condition.POISONED: "🤢",
            Condition.PRONE: "🛌",
            Condition.STUNNED: "💫",
            Condition.UNCONSCIOUS: "💤",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this condition."""
        return {
            Condition.PARALYZED: "bold red",
            Condition.STUNNED: "bold yellow",
            Condition.UNCONSCIOUS: "cyan",
            Condition.CHARMED: "bold magenta",
            Condition.FRIGHTENED: "bold blue",
            Condition.POISONED: "bold green",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies condition color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class Size(NiceEnum):
    """Defines creature sizes, from smallest to largest."""

    TINY = "TINY"
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    HUGE = "HUGE"
    GARGANTUAN = "GARGANTUAN"

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Size):
            return NotImplemented
        members = list(Size)
        return members.index(self) < members.index(other)


class SpeedType(NiceEnum):
    """Defines the movement modes a creature may use."""

    WALKING = "WALKING"
    BURROWING = "BURROWING"
    CLIMBING = "CLIMBING"
    FLYING = "FLYING"
    SWIMMING = "SWIMMING"
    # Recognised so that it can be rejected explicitly.
    CRAWLING = "CRAWLING"
