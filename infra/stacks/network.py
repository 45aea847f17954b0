"""
Network

VPC (Public Subnet のみ), Security Group
"""
from aws_cdk import (
    aws_ec2 as ec2,
)
from constructs import Construct


class Network(Construct):
    """VPC と接続元を制限するセキュリティグループ。"""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        cidr: str,
        max_azs: int,
        subnet_cidr_mask: int,
        security_group_name: str,
        allowed_cidr: str,
        ingress_port: int,
    ) -> None:
        super().__init__(scope, construct_id)

        # VPC
        self.vpc = ec2.Vpc(
            self, 'Vpc',
            ip_addresses=ec2.IpAddresses.cidr(cidr),
            max_azs=max_azs,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name='PublicSubnet',
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=subnet_cidr_mask,
                ),
            ],
        )

        # Security Group
        self.security_group = ec2.SecurityGroup(
            self, 'SecurityGroup',
            vpc=self.vpc,
            allow_all_outbound=True,
            security_group_name=security_group_name,
        )

        # 許可された接続元からのみ HTTP を受け付ける
        self.security_group.add_ingress_rule(
            ec2.Peer.ipv4(allowed_cidr),
            ec2.Port.tcp(ingress_port),
        )
