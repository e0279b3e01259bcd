"""Topic template rendering for the template-routed pipeline."""

import jinja2

from promrouter.exceptions import ConfigValidationError, TemplateRenderError

_environment = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    autoescape=False,
    keep_trailing_newline=False,
)


class TopicTemplate:
    """Jinja2 template rendered against a sample's label mapping.

    Labels are exposed as top-level variables, so ``{{ __name__ }}`` is the
    metric name and ``{{ job }}`` the ``job`` label.

    Referencing an absent label is a render error, so the series is dropped
    and counted instead of being published under a placeholder topic such
    as ``metrics.<no value>``. Labels that may be absent take a fallback
    with the ``default`` filter: ``{{ job | default("unknown") }}``.

    Example:
        template = TopicTemplate("metrics.{{ job }}")
        template.render({"__name__": "up", "job": "node"})  # "metrics.node"
    """

    def __init__(self, source: str):
        """Compile the template.

        Raises:
            ConfigValidationError: If the template has a syntax error
        """
        self.source = source
        try:
            self._template = _environment.from_string(source)
        except jinja2.TemplateSyntaxError as e:
            raise ConfigValidationError(
                f"Invalid topic template {source!r}: {e}", template=source
            ) from e

    def render(self, labels: dict[str, str]) -> str:
        """Render the topic for a label mapping.

        Raises:
            TemplateRenderError: If rendering fails
        """
        try:
            return self._template.render(labels)
        except jinja2.TemplateError as e:
            raise TemplateRenderError(str(e), template=self.source) from e
