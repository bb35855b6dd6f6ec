"""
Persona registry.

Holds the built-in mode catalog and the read operations over the `modes`
table. The table is reference data: `replace_all_modes` swaps its contents
for the catalog in one transaction and is safe to run repeatedly.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from adaptive_chat.db.models import Mode, PersonaMode
from adaptive_chat.errors import NotFoundError
from adaptive_chat.schemas.modes import ModeDefinition

logger = logging.getLogger(__name__)


def _theme(name: str, display_name: str, primary: str, secondary: str, accent: str,
           background: str, gradient: list[str], text: str, text_secondary: str,
           user_bubble: str, ai_bubble: str, border: str) -> dict:
    return {
        "name": name,
        "display_name": display_name,
        "colors": {
            "primary": primary,
            "secondary": secondary,
            "accent": accent,
            "background": background,
            "background_gradient": gradient,
            "text": text,
            "text_secondary": text_secondary,
            "user_bubble": user_bubble,
            "ai_bubble": ai_bubble,
            "border": border,
        },
    }


DEVELOPER_PROMPT = """You are a Developer Assistant AI. Your personality is:
- Concise and technical
- Logical and methodical
- Expert in programming languages, frameworks, and best practices
- Provide code examples and debugging help
- Use technical jargon appropriately
- Focus on efficiency and optimization

Answer questions with precision and include code snippets when relevant."""

LEARNER_PROMPT = """You are a Learning and Tutoring AI. Your personality is:
- Encouraging and supportive
- Patient and didactic
- Break down complex concepts into simple steps
- Use analogies and examples to explain
- Celebrate progress and achievements
- Make learning fun and engaging
- Ask questions to ensure understanding

Help users learn and grow their skills with enthusiasm."""

HR_PROMPT = """You are an HR and IT Operations Assistant. Your personality is:
- Polished and professional
- Supportive and empathetic
- Process-driven and organized
- Clear in communication
- Helpful with policies and procedures
- Maintain confidentiality and professionalism

Assist with HR queries, IT support, and operational matters in a professional manner."""


MODE_CATALOG: list[ModeDefinition] = [
    ModeDefinition.model_validate({
        "name": PersonaMode.DEVELOPER,
        "display_name": "Developer Assistant",
        "icon": "💻",
        "description": "Technical coding assistance and debugging",
        "system_prompt": DEVELOPER_PROMPT,
        "greeting": "Let's crush some code, {name}.",
        "themes": [
            _theme("neural-blue", "Neural Blue", "#1E88E5", "#90CAF9", "#E3F2FD", "#E3F2FD",
                   ["#E3F2FD", "#BBDEFB", "#90CAF9"], "#0D47A1", "#1565C0", "#1E88E5", "#BBDEFB", "#90CAF960"),
            _theme("midnight-cyan", "Midnight Cyan", "#00ACC1", "#26C6DA", "#80DEEA", "#0E141B",
                   ["#0E141B", "#1a2530", "#0E141B"], "#f5f5f5", "#b0bec5", "#00ACC1", "#1a2530", "#00ACC160"),
            _theme("cyber-indigo", "Cyber Indigo", "#3949AB", "#5C6BC0", "#9FA8DA", "#0A0D1A",
                   ["#0A0D1A", "#1a1f3a", "#0A0D1A"], "#f5f5f5", "#c5cae9", "#3949AB", "#1a1f3a", "#3949AB60"),
            _theme("graphite-silver", "Graphite Silver", "#B0BEC5", "#CFD8DC", "#ECEFF1", "#121212",
                   ["#121212", "#1e1e1e", "#121212"], "#f5f5f5", "#cfd8dc", "#B0BEC5", "#1e1e1e", "#B0BEC560"),
        ],
    }),
    ModeDefinition.model_validate({
        "name": PersonaMode.LEARNER,
        "display_name": "Learning Mode",
        "icon": "🎓",
        "description": "Interactive tutoring and skill development",
        "system_prompt": LEARNER_PROMPT,
        "greeting": "Ready for your next challenge, {name}?",
        "themes": [
            _theme("aurora-teal", "Aurora Teal", "#00897B", "#4DB6AC", "#E0F2F1", "#E0F2F1",
                   ["#E0F2F1", "#B2DFDB", "#80CBC4"], "#004D40", "#00695C", "#00897B", "#B2DFDB", "#4DB6AC60"),
            _theme("cosmic-lilac", "Cosmic Lilac", "#7E57C2", "#B39DDB", "#EDE7F6", "#EDE7F6",
                   ["#EDE7F6", "#D1C4E9", "#B39DDB"], "#4A148C", "#6A1B9A", "#7E57C2", "#D1C4E9", "#B39DDB60"),
            _theme("obsidian-purple", "Obsidian Purple", "#8E24AA", "#AB47BC", "#CE93D8", "#1A0B24",
                   ["#1A0B24", "#2d1b3d", "#1A0B24"], "#f5f5f5", "#e1bee7", "#8E24AA", "#2d1b3d", "#8E24AA60"),
            _theme("sage-green", "Sage Green", "#43A047", "#A5D6A7", "#E8F5E9", "#E8F5E9",
                   ["#E8F5E9", "#C8E6C9", "#A5D6A7"], "#1B5E20", "#2E7D32", "#43A047", "#C8E6C9", "#A5D6A760"),
        ],
    }),
    ModeDefinition.model_validate({
        "name": PersonaMode.HR,
        "display_name": "HR/IT Operations",
        "icon": "🧾",
        "description": "Professional HR and IT support",
        "system_prompt": HR_PROMPT,
        "greeting": "Welcome back, {name}. Let's keep operations smooth.",
        "themes": [
            _theme("solar-amber", "Solar Amber", "#F9A825", "#FFD54F", "#FFF8E1", "#FFF8E1",
                   ["#FFF8E1", "#FFECB3", "#FFD54F"], "#F57F17", "#F9A825", "#F9A825", "#FFECB3", "#FFD54F60"),
            _theme("emerald-noir", "Emerald Noir", "#2E7D32", "#66BB6A", "#A5D6A7", "#0C1A0C",
                   ["#0C1A0C", "#1b4d1b", "#0C1A0C"], "#f5f5f5", "#a5d6a7", "#2E7D32", "#1b4d1b", "#2E7D3260"),
            _theme("crimson-edge", "Crimson Edge", "#E53935", "#EF9A9A", "#FFEBEE", "#FFEBEE",
                   ["#FFEBEE", "#FFCDD2", "#EF9A9A"], "#B71C1C", "#C62828", "#E53935", "#FFCDD2", "#EF9A9A60"),
            _theme("sunset-coral", "Sunset Coral", "#FF7043", "#FF8A65", "#FFCCBC", "#1A0E0A",
                   ["#1A0E0A", "#3d1f1a", "#1A0E0A"], "#f5f5f5", "#ffccbc", "#FF7043", "#3d1f1a", "#FF704360"),
        ],
    }),
]

# Used when a stored chat refers to a mode missing from the registry
FALLBACK_SYSTEM_PROMPT = DEVELOPER_PROMPT


async def replace_all_modes(
    db: AsyncSession,
    definitions: list[ModeDefinition] | None = None,
) -> int:
    """
    Replace every stored mode with `definitions` (the built-in catalog by default).

    Runs as one transaction, so readers see either the old or the new set.
    Returns the number of modes written.
    """
    definitions = MODE_CATALOG if definitions is None else definitions

    await db.execute(delete(Mode))
    for position, definition in enumerate(definitions):
        data = definition.model_dump(mode="json")
        db.add(Mode(position=position, **data))
    await db.commit()

    logger.info("Seeded %d modes", len(definitions))
    return len(definitions)


async def list_modes(db: AsyncSession) -> list[Mode]:
    """All modes in catalog order."""
    result = await db.execute(select(Mode).order_by(Mode.position))
    return list(result.scalars().all())


async def find_mode(db: AsyncSession, name: str) -> Mode | None:
    result = await db.execute(select(Mode).where(Mode.name == name))
    return result.scalar_one_or_none()


async def get_mode(db: AsyncSession, name: str) -> Mode:
    """Single mode by name. Raises NotFoundError when it is not registered."""
    mode = await find_mode(db, name)
    if mode is None:
        raise NotFoundError("Mode not found")
    return mode


async def system_prompt_for(db: AsyncSession, name: str) -> str:
    mode = await find_mode(db, name)
    if mode is None:
        logger.warning("Mode %s missing from registry, using fallback system prompt", name)
        return FALLBACK_SYSTEM_PROMPT
    return mode.system_prompt
