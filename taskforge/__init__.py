"""taskforge -- turns a free-text project brief into a runnable project tree.

The pipeline has three stages:

* **plan** (``taskforge.planner``) -- break a brief into typed technical tasks
  and render an execution plan.
* **build** (``taskforge.builder``) -- generate source files per task through
  a remote text-generation model, falling back to hand-authored templates.
* **scaffold** (``taskforge.scaffolder``) -- assemble the generated files into
  an installable ``frontend/`` + ``backend/`` tree with manifests and start
  scripts.

Quick usage::

    from taskforge.pipeline import ProjectPipeline
    from taskforge.planner.models import ProjectBrief

    pipeline = ProjectPipeline(config)
    result = await pipeline.generate_project(ProjectBrief(description="..."))
"""

__version__ = "0.1.0"
