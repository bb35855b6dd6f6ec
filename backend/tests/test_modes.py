"""Persona catalog endpoints and seeding."""

from sqlalchemy import func, select

from adaptive_chat.db.models import Mode
from adaptive_chat.services.personas import MODE_CATALOG, replace_all_modes, system_prompt_for


async def test_list_modes_is_public_and_ordered(client):
    response = await client.get("/api/modes")

    assert response.status_code == 200
    modes = response.json()
    assert [m["name"] for m in modes] == ["developer", "learner", "hr"]
    for mode in modes:
        assert len(mode["themes"]) == 4
        assert "{name}" in mode["greeting"]
        assert mode["systemPrompt"]


async def test_theme_colors_have_three_stop_gradient(client):
    developer = (await client.get("/api/modes/developer")).json()

    theme = developer["themes"][0]
    assert theme["name"] == "neural-blue"
    assert len(theme["colors"]["backgroundGradient"]) == 3
    assert theme["colors"]["userBubble"].startswith("#")


async def test_get_unknown_mode_is_404(client):
    response = await client.get("/api/modes/pirate")

    assert response.status_code == 404
    assert response.json() == {"detail": "Mode not found"}


async def test_reseeding_is_idempotent(db_session):
    await replace_all_modes(db_session)
    await replace_all_modes(db_session)

    count = (await db_session.execute(select(func.count()).select_from(Mode))).scalar()
    assert count == len(MODE_CATALOG)


async def test_unknown_mode_falls_back_to_developer_prompt(db_session):
    prompt = await system_prompt_for(db_session, "pirate")

    assert prompt == MODE_CATALOG[0].system_prompt


async def test_health_is_outside_api_prefix(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
