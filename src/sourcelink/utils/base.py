"""
Base Classes and Utilities for sourcelink
Execution flow control shared by the runtime
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar('T')


# ==================== EXECUTION FLOW CONTROL ====================

class ExecutionFlowTag(Enum):
    """Execution flow control tags"""
    CONTINUE = "continue"
    RETURN = "return"


@dataclass
class ExecutionFlow(Generic[T]):
    """Represents execution flow control without exceptions"""
    tag: ExecutionFlowTag
    value: Optional[T] = None

    @classmethod
    def continue_execution(cls, value: Optional[T] = None) -> 'ExecutionFlow[T]':
        """Continue normal execution, carrying the last statement value"""
        return cls(ExecutionFlowTag.CONTINUE, value)

    @classmethod
    def return_value(cls, value: T) -> 'ExecutionFlow[T]':
        """Return from function with value"""
        return cls(ExecutionFlowTag.RETURN, value)

    def is_continue(self) -> bool:
        return self.tag == ExecutionFlowTag.CONTINUE

    def is_return(self) -> bool:
        return self.tag == ExecutionFlowTag.RETURN

    def get_value(self) -> Optional[T]:
        return self.value


# Type alias for statement execution results
StatementResult = ExecutionFlow[Any]
