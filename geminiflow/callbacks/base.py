from typing import Any


class NodeCallbackHandler:
    """
    Receives node lifecycle events. Override the hooks you need.

    Every hook gets the serialized node first. `on_node_*` fire once per run, `on_node_execute_*`
    once per attempt, so a run with retries reports several execute events.
    """

    def on_node_start(self, serialized: dict[str, Any], input_data: Any, **kwargs: Any):
        pass

    def on_node_end(self, serialized: dict[str, Any], output_data: Any, **kwargs: Any):
        pass

    def on_node_error(self, serialized: dict[str, Any], error: BaseException, **kwargs: Any):
        pass

    def on_node_execute_start(self, serialized: dict[str, Any], input_data: Any, **kwargs: Any):
        pass

    def on_node_execute_end(self, serialized: dict[str, Any], output_data: Any, **kwargs: Any):
        pass

    def on_node_execute_error(self, serialized: dict[str, Any], error: BaseException, **kwargs: Any):
        pass
