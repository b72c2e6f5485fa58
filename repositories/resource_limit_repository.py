from models.errors import ResourceProbeError


class ResourceLimitRepository:
    """
    Reads process resource limits from the host.
    """

    @staticmethod
    def read_open_file_limit() -> int:
        """
        Soft RLIMIT_NOFILE of this process (what `ulimit -n` prints).

        Raises:
            ResourceProbeError: the platform has no rlimits, the limit is
            unlimited, or it is not a positive number.
        """
        try:
            import resource
        except ImportError as err:
            raise ResourceProbeError("Host does not expose resource limits") from err

        try:
            soft, _hard = resource.getrlimit(resource.RLIMIT_NOFILE)
        except (OSError, ValueError) as err:
            raise ResourceProbeError(f"getrlimit(RLIMIT_NOFILE) failed: {err}") from err

        if soft == resource.RLIM_INFINITY:
            raise ResourceProbeError("Open file limit is unlimited")
        if soft <= 0:
            raise ResourceProbeError(f"Open file limit is not positive: {soft}")
        return int(soft)
