from types import SimpleNamespace

import pytest

from app.modules.quiz import generator


class FakeAgent:
    """Stands in for a pydantic-ai Agent; records what it was built and run with."""

    def __init__(self, output):
        self.output = output
        self.name = None
        self.json_schema = None
        self.prompts = []

    async def run(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.output, Exception):
            raise self.output
        return SimpleNamespace(output=self.output)


@pytest.fixture
def fake_agent(monkeypatch):
    """Install a FakeAgent returning ``output`` in place of the real agent factory."""

    def install(output):
        agent = FakeAgent(output)

        def build(name, json_schema, shape):
            agent.name = name
            agent.json_schema = json_schema
            return agent

        monkeypatch.setattr(generator, "_build_agent", build)
        return agent

    return install


@pytest.fixture
def sample_quiz_output():
    return {
        "title": "Photosynthesis basics",
        "multiple_choice_questions": [
            {
                "question_type": "multiple_choice",
                "question": "Where does photosynthesis happen?",
                "choices": [
                    {"text": "Chloroplast", "is_correct": True},
                    {"text": "Nucleus", "is_correct": False},
                    {"text": "Ribosome", "is_correct": False},
                    {"text": "Vacuole", "is_correct": False},
                ],
            }
        ],
        "written_questions": [
            {"question_type": "written", "question": "Explain the role of light."}
        ],
    }
