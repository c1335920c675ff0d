"""Application layer: exchange orchestration and polling use cases."""
