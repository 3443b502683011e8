"""Helpers shared by the tool modules.

Handlers never raise: argument errors, timestamp errors and client errors
all become error replies here.
"""

from typing import Any, Awaitable, Callable, Dict, Tuple, Type, TypeVar

from pydantic import ValidationError

from ..core.errors import DatadogClientError, InputValidationError, InvalidTimestamp
from ..core.logger import DatadogMcpLogger
from ..core.models import DomainType, Outcome, TimeRangeArgs, ToolArgs, ToolDefinition, ToolReply
from ..core.responses import error_reply
from ..core.timestamps import TimeUnit, normalize_timestamp, to_iso

ArgsT = TypeVar("ArgsT", bound=ToolArgs)


def parse_args(model: Type[ArgsT], raw: Any) -> ArgsT:
    """Validate raw tool arguments; pydantic errors become ``InputValidationError``."""
    try:
        return model.model_validate(raw if isinstance(raw, dict) else {})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise InputValidationError(f"Invalid arguments: {problems}") from None


def time_range(args: TimeRangeArgs, unit: TimeUnit) -> Tuple[int, int]:
    return normalize_timestamp(args.from_, unit), normalize_timestamp(args.to, unit)


def describe_range(from_: int, to: int, unit: TimeUnit) -> Dict[str, str]:
    return {"from": to_iso(from_, unit), "to": to_iso(to, unit)}


def unwrap(outcome: Outcome) -> Any:
    """Data of a successful outcome; the error of a failed one is raised."""
    data, error = outcome
    if error is not None:
        raise error
    return data


def make_tool(name: str, domain: DomainType, description: str, args_model: Type[ArgsT],
              run: Callable[[ArgsT], Awaitable[ToolReply]],
              logger: DatadogMcpLogger) -> ToolDefinition:
    """Wrap ``run`` into a handler that always returns a ``ToolReply``."""

    async def handler(raw_args: Dict[str, Any]) -> ToolReply:
        try:
            return await run(parse_args(args_model, raw_args))
        except DatadogClientError as e:
            return error_reply(e.message, e.status_code)
        except InvalidTimestamp as e:
            return error_reply(str(e))
        except Exception as e:
            logger.error(f"Error handling {name}: {e}", domain)
            return error_reply(str(e) or type(e).__name__)

    return ToolDefinition(
        name=name,
        domain=domain,
        description=description,
        parameter_schema=args_model.parameter_schema(),
        handler=handler,
    )
