"""
function_agent/resolver.py

Decides how the prompt variables of a template are bound for one request.

The live user message may fill exactly one unbound slot (typically the
question). With two or more unbound slots there is no safe guess, so the
request is rejected.
"""

from typing import Any, Dict, List, Optional, Sequence

from function_agent.schemas import Resolution, ResolutionOutcome


def _is_supplied(prompt_values: Dict[str, Any], name: str) -> bool:
    value = prompt_values.get(name)
    return value is not None and value != ""


def find_unresolved(
    input_variables: Sequence[str], prompt_values: Optional[Dict[str, Any]]
) -> List[str]:
    """Variables without a value, in declared order."""
    prompt_values = prompt_values or {}
    return [name for name in input_variables if not _is_supplied(prompt_values, name)]


def resolve_prompt_variables(
    input_variables: Sequence[str],
    prompt_values: Optional[Dict[str, Any]],
    raw_input: str = "",
) -> ResolutionOutcome:
    """
    Returns exactly one of FREE_FORM, TEMPLATED or ERROR.

    Args:
        input_variables: Declared template variables, in template order.
        prompt_values: Caller-supplied values; never mutated.
        raw_input: The user message, bound to the single missing variable.
    """
    if not input_variables or prompt_values is None:
        return ResolutionOutcome(Resolution.FREE_FORM)

    missing = find_unresolved(input_variables, prompt_values)

    # A present-but-empty map still counts every variable as unresolved
    if len(missing) >= 2:
        return ResolutionOutcome(Resolution.ERROR, missing=missing)

    if not prompt_values:
        return ResolutionOutcome(Resolution.FREE_FORM, missing=missing)

    bound = dict(prompt_values)
    if missing:
        bound[missing[0]] = raw_input

    return ResolutionOutcome(Resolution.TEMPLATED, bound_values=bound, missing=missing)
