"""Run the Europass builder from the project root. Use: python run_app.py"""
import os
import subprocess
import sys

root = os.path.dirname(os.path.abspath(__file__))
env = dict(os.environ)
# Package imports resolve without an editable install
env["PYTHONPATH"] = os.pathsep.join(p for p in (root, env.get("PYTHONPATH", "")) if p)
subprocess.run(
    [sys.executable, "-m", "streamlit", "run", os.path.join(root, "europass_builder", "app.py")],
    check=True,
    env=env,
)
