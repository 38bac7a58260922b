"""
PAGEFIT - Proportional Auto-scaling Geometry Engine for Fitted Itemized Templates

Single-page auto-fit engine for a resume editor. Takes variable-length resume
content and a fixed A4 page and computes a consistent set of scale factors so the
rendered content fills the page without overflowing.

Architecture:
- Content Context: Resume content tree and YAML loading
- Scaling Context: Density -> scale factor model and its configuration
- Rendering Context: Surface abstraction, measurement and parameter application
- Fitting Context: Fit solver and the scheduling state machine around it
"""

__version__ = "0.1.0"
