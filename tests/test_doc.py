# third parties
import pytest

# Gauge tasks application
from gauge_tasks.app.configuration import Configuration
from gauge_tasks.pipelines.doc import generate_doc

# Gauge tasks utilities
from gauge_tasks.utils import Context, InMemoryReporter, Label, TaskFailure


@pytest.mark.asyncio
class TestGenerateDoc:
    async def test_esdoc_config(
        self, config: Configuration, context: Context, reporter: InMemoryReporter
    ):
        # prints the configuration file given with '-c'
        config.commands.esdoc = "sh -c 'cat \"$2\"' esdoc"

        destination = await generate_doc(config=config, context=context)

        assert destination == config.project_dir / "docs"
        outputs = "".join(
            e.text for e in reporter.entries if str(Label.STD_OUTPUT) in e.labels
        )
        assert '"source": "./lib"' in outputs
        assert '"destination": "./docs"' in outputs

    async def test_failure(self, config: Configuration, context: Context):
        config.commands.esdoc = "false"

        with pytest.raises(TaskFailure) as e:
            await generate_doc(config=config, context=context)

        assert e.value.task == "doc"
