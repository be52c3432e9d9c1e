"""
Create a GitHub repository for a local project and push to it

``ghmkrepo`` logs in to GitHub's web interface, fills in the "Create a New
Repository" form using the project's name & description (taken from the
command line or from the project's ``META.yml``), and then adds the new
repository as a remote of the local Git repository and pushes to it.
"""

from importlib.metadata import version

__version__ = version("ghmkrepo")
__license__ = "MIT"
