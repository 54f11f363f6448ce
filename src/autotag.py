import pulumi

from taggable import is_taggable


def register_auto_tags(auto_tags):
    """Merge ``auto_tags`` into the tags of every taggable resource in the stack."""
    pulumi.runtime.register_stack_transformation(lambda args: auto_tag(args, auto_tags))


def auto_tag(args, auto_tags):
    if is_taggable(args.type_):
        # Tags set on the resource win over the stack-wide ones
        args.props["tags"] = {**auto_tags, **(args.props.get("tags") or {})}
        return pulumi.ResourceTransformationResult(args.props, args.opts)
    return None
