# src/spicelib_core/validation/issue_codes.py
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class CircuitIssueCode(Enum):
    """
    Registry of circuit validation issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """

    GND_001 = ("GND_001", "Circuit '{circuit_name}' does not have a ground node (node '0'). This may cause simulation issues.")
    NET_001 = ("NET_001", "Net '{net_name}' has only a single connection, to component '{connected_to_component}'.")
    MODEL_001 = ("MODEL_001", "Component '{component_name}' references model '{model_name}', which is not defined.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name}: '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}."
