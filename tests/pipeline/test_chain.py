"""Unit tests for ProcessorChain ordering and substitution."""

from __future__ import annotations

from taskvault.pipeline.chain import ProcessorChain
from taskvault.pipeline.changeset import WritableTaskView
from taskvault.pipeline.processors import (
    AutoUpdateProcessor,
    ChangeListProcessor,
    InstanceProcessor,
    LocalTaskProcessor,
    SearchIndexProcessor,
    TaskProcessor,
    TaskValidatorProcessor,
)
from taskvault.services.task_provider import TaskProvider


class Recorder(TaskProcessor):
    """Records every hook call into a shared log."""

    def __init__(self, name, log):
        self.name = name
        self.log = log

    def before_insert(self, view, is_trusted):
        self.log.append((self.name, "before_insert", is_trusted))

    def after_insert(self, view, is_trusted):
        self.log.append((self.name, "after_insert", is_trusted))

    def before_update(self, view, is_trusted):
        self.log.append((self.name, "before_update", is_trusted))

    def after_update(self, view, is_trusted):
        self.log.append((self.name, "after_update", is_trusted))

    def before_delete(self, view, is_trusted):
        self.log.append((self.name, "before_delete", is_trusted))

    def after_delete(self, view, is_trusted):
        self.log.append((self.name, "after_delete", is_trusted))


class TestDefaultChain:
    def test_order(self, store, index):
        chain = ProcessorChain.default(store, index)
        assert [type(p) for p in chain] == [
            TaskValidatorProcessor,
            AutoUpdateProcessor,
            ChangeListProcessor,
            InstanceProcessor,
            SearchIndexProcessor,
            LocalTaskProcessor,
        ]
        assert len(chain) == 6

    def test_clock_is_passed_to_auto_update(self, store, index):
        chain = ProcessorChain.default(store, index, clock=lambda: 42)
        auto_update = chain.processors[1]
        assert auto_update.clock() == 42


class TestRun:
    def test_hooks_run_in_order(self, store, local_list):
        log = []
        chain = ProcessorChain.of([Recorder("a", log), Recorder("b", log)])
        chain.run("before_insert", WritableTaskView(store, None, {"list_id": local_list}), True)
        assert log == [("a", "before_insert", True), ("b", "before_insert", True)]

    def test_later_stage_sees_earlier_edits(self, store, local_list):
        seen = []

        class Setter(TaskProcessor):
            def before_insert(self, view, is_trusted):
                view.set("title", "from first stage")

        class Reader(TaskProcessor):
            def before_insert(self, view, is_trusted):
                seen.append(view.value_of("title"))

        chain = ProcessorChain.of([Setter(), Reader()])
        chain.run("before_insert", WritableTaskView(store, None, {"list_id": local_list}), False)
        assert seen == ["from first stage"]

    def test_empty_chain(self, store, local_list):
        chain = ProcessorChain()
        chain.run("after_update", WritableTaskView(store, None, {}), False)
        assert len(chain) == 0


class TestProviderWithCustomChain:
    def test_each_row_runs_before_commit_after(self, store, local_list):
        log = []
        provider = TaskProvider(store, chain=ProcessorChain.of([Recorder("r", log)]))
        first = provider.run_insert({"list_id": local_list, "title": "one"})
        second = provider.run_insert({"list_id": local_list, "title": "two"})
        log.clear()

        assert provider.run_update([first, second], {"title": "both"}) == 2
        assert log == [
            ("r", "before_update", False),
            ("r", "after_update", False),
            ("r", "before_update", False),
            ("r", "after_update", False),
        ]

    def test_subset_chain_skips_validation(self, store, local_list):
        # without the validator stage nothing rejects a sync-adapter field
        provider = TaskProvider(store, chain=ProcessorChain.of([]))
        task_id = provider.run_insert({"list_id": local_list, "uid": "raw"})
        assert provider.get_task(task_id).uid == "raw"
        assert provider.get_instance(task_id) is None
