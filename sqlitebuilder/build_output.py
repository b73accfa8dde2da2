import datetime
import json
import os

from .errors import BuildOutputError

BUILD_OUTPUT_FILE = "build_output.json"


class BuildOutput:
    """Dependencies and produced assets of a single build."""

    def __init__(self):
        self.timestamp = datetime.datetime.now().replace(microsecond=0).isoformat()
        self.dependencies = []
        self.assets = []
        self.written_to = None

    def add_dependency(self, uri):
        if uri not in self.dependencies:
            self.dependencies.append(uri)

    def add_asset(self, asset):
        self.assets.append(asset)

    def to_dict(self):
        return {
            "timestamp": self.timestamp,
            "dependencies": list(self.dependencies),
            "assets": list(self.assets),
        }

    def write_to_file(self, out_dir):
        """Persist the output as JSON in out_dir. A build output is written only once."""
        if self.written_to is not None:
            raise BuildOutputError(f"Build output was already written to {self.written_to}")
        output_path = os.path.join(out_dir, BUILD_OUTPUT_FILE)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=4)
            f.write("\n")
        self.written_to = output_path
        return output_path

    def __repr__(self):
        return f"BuildOutput(dependencies={self.dependencies!r}, assets={self.assets!r})"


def read_build_output(out_dir):
    with open(os.path.join(out_dir, BUILD_OUTPUT_FILE), "r", encoding="utf-8") as f:
        return json.load(f)
