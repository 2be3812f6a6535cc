from __future__ import annotations
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from .logging_setup import get_logger

log = get_logger("valheim.launcher.proc")

@dataclass
class ProcessHandle:
    name: str
    proc: subprocess.Popen

def _open_log_file(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    return open(path, "a", encoding="utf-8", buffering=1)

class ProcessRunner:
    def __init__(self):
        self.handles: List[ProcessHandle] = []

    def start(self, name: str, cmd: List[str], *, cwd: Optional[Path] = None, log_file: Optional[Path] = None,
              env: Optional[dict] = None) -> ProcessHandle:
        log.info("Starting %s: %s", name, " ".join(cmd))
        stdout = stderr = None
        fh = None
        if log_file:
            fh = _open_log_file(log_file)
            stdout = fh
            stderr = subprocess.STDOUT

        try:
            proc = subprocess.Popen(cmd, cwd=str(cwd) if cwd else None, stdout=stdout, stderr=stderr, env=env)
        finally:
            # the child holds its own copy of the descriptor
            if fh is not None:
                fh.close()
        h = ProcessHandle(name=name, proc=proc)
        self.handles.append(h)
        return h
