import numpy as np
from typing import Any


class ExperimentBase:
    def __init__(self):
        self.log_file: Any = None
        self.indent = 0

    def log_write(self, msg: Any = ''):
        """Write to the log file, if there is a log file."""
        if self.log_file:
            for line in str(msg).split('\n'):
                self.log_file.write(4*self.indent*' ' + line + '\n')

    def log_as_str(self, obj: Any) -> str:
        if isinstance(obj, (float, np.floating)):
            return f'{float(obj):.6g}'
        return str(obj)

    def log_indent(self):
        """Increase the indent in the log file."""
        self.indent += 1

    def log_deindent(self):
        """Decrease the indent in the log file."""
        self.indent -= 1
