"""Tree rewriting for htmp: construct expansion and stack processing."""

from htmp.rewriter.core import TreeRewriter
from htmp.rewriter.stacks import StackBucket, StackProcessor
from htmp.rewriter.statements import Props, strict_equals

__all__ = ["Props", "StackBucket", "StackProcessor", "TreeRewriter", "strict_equals"]
